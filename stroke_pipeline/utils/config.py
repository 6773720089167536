"""Configuration management for the stroke pipeline."""

import yaml
import copy
from typing import Dict, Any, Union
from pathlib import Path


class Config:
    """
    YAML configuration loader.

    Model entries inherit the keys of the 'training' section (e.g. a shared
    random_state) unless they set them themselves. All other values are
    returned untouched.
    """

    def __init__(self, config_path: Union[str, Path]):
        """Load configuration from YAML file."""
        self.config_path = Path(config_path)
        with open(self.config_path, 'r') as f:
            self.config = yaml.safe_load(f) or {}

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'Config':
        """Build a configuration from an in-memory dictionary."""
        instance = cls.__new__(cls)
        instance.config_path = None
        instance.config = copy.deepcopy(config)
        return instance

    def get_model_config(self, model_name: str) -> Dict[str, Any]:
        """
        Get model configuration with training defaults applied.

        Args:
            model_name: Model name from 'models' section

        Returns:
            Deep copy of the model config

        Raises:
            ValueError: If model not found
        """
        models = self.config.get('models', {})
        if model_name not in models:
            raise ValueError(f"Model '{model_name}' not found")

        config = copy.deepcopy(models[model_name] or {})
        for key, value in self.get_training_config().items():
            config.setdefault(key, copy.deepcopy(value))
        return config

    def get_models_config(self) -> Dict[str, Dict[str, Any]]:
        """All model configurations, training defaults applied."""
        return {name: self.get_model_config(name) for name in self.config.get('models', {})}

    # Simple getters for other sections
    def get_data_config(self) -> Dict[str, Any]:
        """Get data configuration."""
        return self.config.get('data', {})

    def get_training_config(self) -> Dict[str, Any]:
        """Get training configuration."""
        return self.config.get('training', {})

    def get_evaluation_config(self) -> Dict[str, Any]:
        """Get evaluation configuration."""
        return self.config.get('evaluation', {})

    def get_output_config(self) -> Dict[str, Any]:
        """Get output configuration."""
        return self.config.get('output', {})

    def __getitem__(self, key: str) -> Any:
        """Allow dict-like access to config."""
        return self.config[key]

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with default."""
        return self.config.get(key, default)


class ModelConfigBuilder:
    """Simple builder for creating model configurations programmatically."""

    def __init__(self):
        self.config = {'enabled': True}

    def set(self, **kwargs) -> 'ModelConfigBuilder':
        """Set any configuration values."""
        self.config.update(kwargs)
        return self

    def set_search(self, k_range=None, cv_folds: int = 10, **search_params) -> 'ModelConfigBuilder':
        """Set cross-validated hyperparameter search options."""
        if k_range is not None:
            self.config['k_range'] = list(k_range)
        self.config['cv_folds'] = cv_folds
        self.config.update(search_params)
        return self

    def disable(self) -> 'ModelConfigBuilder':
        self.config['enabled'] = False
        return self

    def build(self) -> Dict[str, Any]:
        """Return the built configuration."""
        return copy.deepcopy(self.config)
