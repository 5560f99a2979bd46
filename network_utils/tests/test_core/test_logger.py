import pytest
import logging
import os
from network_utils.core.config import Config
from network_utils.core.logger import Logger, LOGGER_NAME
from network_utils.core.exceptions import LoggerError

@pytest.fixture(autouse=True)
def restore_package_logger():
    """Detach handlers and restore the level of the package logger"""
    package_logger = logging.getLogger(LOGGER_NAME)
    level = package_logger.level
    yield
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(level)

@pytest.fixture
def temp_log_file(tmp_path):
    """Create a temporary log file"""
    return tmp_path / "test.log"

@pytest.fixture
def config_with_custom_logging(temp_log_file):
    """Create a config with custom logging settings"""
    config = Config()
    config.update({
        "logging": {
            "level": "DEBUG",
            "file": str(temp_log_file)
        }
    })
    return config

@pytest.fixture
def logger(config_with_custom_logging):
    """Create a logger instance with custom config"""
    return Logger(config_with_custom_logging)

def _flush(logger):
    for handler in logger.logger.handlers:
        handler.flush()

def test_logger_initialization(logger):
    """Test basic logger initialization"""
    assert logger.logger.level == logging.DEBUG
    assert logger.logger.name == "network_utils"
    assert len(logger.logger.handlers) == 1

def test_logger_file_handler(logger, temp_log_file):
    """Test if file handler is properly configured"""
    assert os.path.exists(temp_log_file)

    logger.debug("Test message")
    _flush(logger)

    assert "Test message" in temp_log_file.read_text()

def test_logger_levels(logger, temp_log_file):
    """Test different logging levels"""
    for level in ("debug", "info", "warning", "error"):
        getattr(logger, level)(f"{level} message")
    _flush(logger)

    content = temp_log_file.read_text()
    assert " - WARNING - warning message" in content
    assert " - ERROR - error message" in content

def test_invalid_log_level():
    """Test logger initialization with invalid log level"""
    config = Config()
    config.update({"logging": {"level": "INVALID_LEVEL"}})

    with pytest.raises(LoggerError):
        Logger(config)

def test_invalid_log_file(tmp_path):
    """Test logger initialization with an unusable log directory"""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    config = Config()
    config.update({"logging": {"file": str(blocker / "nested" / "log.txt")}})

    with pytest.raises(LoggerError):
        Logger(config)

def test_request_records_carry_context(logger, temp_log_file):
    """Records from library modules are formatted with their request context"""
    logging.getLogger("network_utils.api.response_handler").warning(
        "GET on /me: 401 with no payload",
        extra={"method": "GET", "endpoint": "/me"}
    )
    _flush(logger)

    content = temp_log_file.read_text()
    assert "method:GET" in content
    assert "endpoint:/me" in content

def test_records_without_context_are_formatted(logger, temp_log_file):
    logging.getLogger("network_utils.download").info("plain record")
    _flush(logger)

    assert "plain record - method:- - endpoint:-" in temp_log_file.read_text()

def test_logger_context(logger, temp_log_file):
    """Test logger context information"""
    logger.info("Test with context", extra={"method": "POST", "endpoint": "/things"})
    _flush(logger)

    content = temp_log_file.read_text()
    assert "method:POST" in content
    assert "endpoint:/things" in content

def test_multiple_handlers(config_with_custom_logging):
    """Test logger with multiple handlers"""
    config_with_custom_logging.update({"logging": {"console_output": True}})

    logger = Logger(config_with_custom_logging)
    assert len(logger.logger.handlers) == 2

def test_reinitialization_replaces_handlers(config_with_custom_logging):
    Logger(config_with_custom_logging)
    logger = Logger(config_with_custom_logging)
    assert len(logger.logger.handlers) == 1

def test_log_rotation(tmp_path):
    """Test log file rotation"""
    config = Config()
    config.update({
        "logging": {
            "file": str(tmp_path / "rotating.log"),
            "max_size": 1024,
            "backup_count": 3
        }
    })

    logger = Logger(config)

    large_message = "x" * 512
    for _ in range(10):
        logger.info(large_message)

    log_files = list(tmp_path.glob("rotating.log*"))
    assert len(log_files) > 1
