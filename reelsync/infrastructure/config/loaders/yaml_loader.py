# reelsync/infrastructure/config/loaders/yaml_loader.py
import json
import logging
import os
from typing import Dict, Any, List, Optional, Union

import yaml


class ConfigError(Exception):
    """Base class for errors raised while loading or validating configuration."""
    pass


class FileNotFoundConfigError(ConfigError):
    """A configuration or schema file does not exist."""
    def __init__(self, path, message=None):
        self.path = path
        self.message = message or f"Configuration file not found: {path}"
        super().__init__(self.message)


class YamlParseError(ConfigError):
    """A YAML file could not be parsed."""
    def __init__(self, file_path, yaml_error):
        self.file_path = file_path
        self.yaml_error = yaml_error
        self.message = f"Error parsing YAML file {file_path}: {str(yaml_error)}"
        super().__init__(self.message)


class SchemaValidationError(ConfigError):
    """A configuration does not satisfy its schema."""
    def __init__(self, file_path, errors):
        self.file_path = file_path
        self.errors = errors
        error_msg = "\n  - ".join([""] + errors)
        self.message = f"Configuration validation failed for {file_path}:{error_msg}"
        super().__init__(self.message)


class YamlConfigLoader:
    """
    Loads YAML configuration files and optionally validates them.
    
    In strict mode (the default) missing files, parse errors and schema
    violations raise; otherwise the loader logs a warning and falls back
    to the supplied default configuration.
    """
    def __init__(self, schema_validator=None):
        """
        Args:
            schema_validator: Optional SchemaValidator used when a schema is given
        """
        self.logger = logging.getLogger("infrastructure.config.loader")
        self.schema_validator = schema_validator
        self.strict_mode = True
        
    def set_strict_mode(self, strict: bool = True):
        """Enable or disable strict mode. Returns self for chaining."""
        self.strict_mode = strict
        return self
        
    def load_file(self, file_path: str, schema: Optional[Union[str, Dict[str, Any]]] = None,
                  default_config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Load a single YAML file.
        
        Args:
            file_path: Path to the YAML file
            schema: JSON schema dict, or path to a JSON schema file
            default_config: Used when the file is missing or broken and strict mode is off
            
        Returns:
            Parsed configuration dictionary; when a validator is set,
            schema defaults are filled in
            
        Raises:
            FileNotFoundConfigError: If the file does not exist (strict mode)
            YamlParseError: If the YAML is malformed (strict mode)
            SchemaValidationError: If validation fails (strict mode)
        """
        if not os.path.isfile(file_path):
            self.logger.error(f"Configuration file not found: {file_path}")
            
            if default_config is not None and not self.strict_mode:
                self.logger.warning(f"Using default configuration instead of missing file: {file_path}")
                return default_config
                
            raise FileNotFoundConfigError(file_path)
        
        try:
            with open(file_path, 'r', encoding='utf-8') as file:
                config = yaml.safe_load(file)
        except yaml.YAMLError as e:
            error = YamlParseError(file_path, e)
            self.logger.error(error.message)
            
            if default_config is not None and not self.strict_mode:
                self.logger.warning(f"Using default configuration due to parse error in {file_path}")
                return default_config
                
            raise error from e
            
        self.logger.debug(f"Loaded configuration from {file_path}")
        
        if config is None:
            self.logger.warning(f"Empty configuration file: {file_path}")
            config = default_config if default_config is not None else {}
            
        if schema is not None and self.schema_validator:
            config = self._validate(file_path, config, schema)
            
        return config
        
    def _validate(self, file_path: str, config: Dict[str, Any],
                  schema: Union[str, Dict[str, Any]]) -> Dict[str, Any]:
        if isinstance(schema, str):
            schema = self.load_schema(schema)
            
        is_valid, errors, updated = self.schema_validator.validate_with_defaults(config, schema)
        if is_valid:
            self.logger.debug(f"Validated configuration {file_path}")
            return updated
            
        error = SchemaValidationError(file_path, errors)
        if self.strict_mode:
            raise error
            
        self.logger.warning(f"{error.message}\nUsing unvalidated configuration.")
        return config
            
    def load_schema(self, schema_path: str) -> Dict[str, Any]:
        """
        Load a JSON schema file.
        
        Raises:
            FileNotFoundConfigError: If the schema file does not exist
            ConfigError: If the schema is not valid JSON
        """
        if not os.path.isfile(schema_path):
            error_msg = f"Schema file not found: {schema_path}"
            self.logger.error(error_msg)
            raise FileNotFoundConfigError(schema_path, error_msg)
            
        try:
            with open(schema_path, 'r', encoding='utf-8') as file:
                return json.load(file)
        except json.JSONDecodeError as e:
            error_msg = f"Error parsing schema file {schema_path}: {str(e)}"
            self.logger.error(error_msg)
            raise ConfigError(error_msg) from e
    
    def load_with_fallbacks(self, file_paths: List[str], 
                            schema: Optional[Union[str, Dict[str, Any]]] = None) -> Dict[str, Any]:
        """
        Try several paths in priority order and return the first that loads.
        
        Raises:
            ConfigError: If every path fails and strict mode is on
        """
        errors = []
        
        for path in file_paths:
            try:
                config = self.load_file(path, schema)
                self.logger.info(f"Loaded configuration from {path}")
                return config
            except ConfigError as e:
                errors.append(f"{path}: {str(e)}")
                
        error_msg = "All configuration files failed to load:\n" + "\n".join(f"  - {err}" for err in errors)
        self.logger.error(error_msg)
        
        if self.strict_mode:
            raise ConfigError(error_msg)
            
        self.logger.warning("Using empty configuration as fallback")
        return {}
