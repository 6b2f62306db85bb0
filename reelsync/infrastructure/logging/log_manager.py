# reelsync/infrastructure/logging/log_manager.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Dict, Any, Optional, Union


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class LogManager:
    """
    Centralized logging configuration manager.
    """
    def __init__(self):
        """Initialize the log manager."""
        self.root_logger = logging.getLogger()
        self.loggers = {}  # name -> logger
        self.handlers = {}  # name -> handler
        self.initialized = False
        
    def initialize(self, config: Dict[str, Any], force: bool = False):
        """
        Initialize logging from the ``logging`` configuration section.
        
        Args:
            config: Logging configuration dictionary
            force: Re-apply configuration even if already initialized
        """
        if self.initialized and not force:
            return
            
        log_level = self._get_log_level(config.get('level', 'INFO'))
        log_format = config.get('format', DEFAULT_FORMAT)
        date_format = config.get('date_format', '%Y-%m-%d %H:%M:%S')
        file_config = config.get('file') or {}
        
        self.root_logger.setLevel(log_level)
        
        # Drop handlers from any previous initialization
        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)
            handler.close()
        self.handlers.clear()
            
        formatter = logging.Formatter(log_format, date_format)
        
        if config.get('console', True):
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(self._get_log_level(config.get('console_level', log_level)))
            console_handler.setFormatter(formatter)
            self.root_logger.addHandler(console_handler)
            self.handlers['console'] = console_handler
            
        if file_config.get('enabled', False):
            file_path = file_config.get('path', 'logs/reelsync.log')
            
            log_dir = os.path.dirname(file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
                
            file_handler = RotatingFileHandler(
                file_path,
                maxBytes=file_config.get('max_bytes', 10 * 1024 * 1024),
                backupCount=file_config.get('backup_count', 5)
            )
            file_handler.setLevel(self._get_log_level(file_config.get('level', log_level)))
            file_handler.setFormatter(formatter)
            self.root_logger.addHandler(file_handler)
            self.handlers['file'] = file_handler
            
        # Parents first so child levels override them
        logger_configs = config.get('loggers') or {}
        for logger_name in sorted(logger_configs, key=lambda name: len(name.split('.'))):
            logger_config = logger_configs[logger_name] or {}
            logger = logging.getLogger(logger_name)
            logger.setLevel(self._get_log_level(logger_config.get('level', log_level)))
            logger.propagate = logger_config.get('propagate', True)
            self.loggers[logger_name] = logger
            
            self.root_logger.debug(
                f"Configured logger '{logger_name}' with "
                f"level={logging.getLevelName(logger.level)}, propagate={logger.propagate}"
            )
            
        self.root_logger.debug("Logging system initialized")
        self.initialized = True
        
    def shutdown(self):
        """Detach and close every handler installed by this manager."""
        for handler in self.handlers.values():
            self.root_logger.removeHandler(handler)
            handler.close()
        self.handlers.clear()
        self.initialized = False
        
    @staticmethod
    def _get_log_level(level_name: Union[str, int]) -> int:
        """
        Convert a level name (DEBUG, INFO, ...) to its numeric value.
        Unknown names fall back to INFO.
        """
        if isinstance(level_name, int):
            return level_name
            
        level = logging.getLevelName(str(level_name).upper())
        return level if isinstance(level, int) else logging.INFO
        

# Singleton instance
log_manager = LogManager()


DEFAULT_LOGGING_CONFIG = {
    'level': 'INFO',
    'console': True,
    'console_level': 'INFO',
    'file': {'enabled': False},
    'loggers': {
        'domain.machine': {'level': 'INFO'},
        'domain.events': {'level': 'WARNING'},
        'infrastructure': {'level': 'WARNING'},
    }
}


def initialize_logging(config: Optional[Dict[str, Any]] = None, force: bool = False) -> LogManager:
    """
    Initialize the logging system.
    
    Args:
        config: Logging configuration; DEFAULT_LOGGING_CONFIG when omitted
        force: Re-apply configuration even if already initialized
        
    Returns:
        The shared LogManager
    """
    log_manager.initialize(config if config is not None else DEFAULT_LOGGING_CONFIG, force=force)
    return log_manager
