"""
Fixpoint Configuration

This module provides configuration settings for the interpreter,
the fixed-point driver and tree verification.
"""

import logging
from dataclasses import dataclass
from typing import Optional


@dataclass
class InterpreterConfig:
    """Configuration for the evaluator."""
    max_recursion_depth: Optional[int] = 400
    max_steps: Optional[int] = None


@dataclass
class DriverConfig:
    """Configuration for the fixed-point driver."""
    max_iterations: int = 5


@dataclass
class VerifierConfig:
    """Configuration for AST verification."""
    max_depth: int = 200
    max_nodes: int = 10000


@dataclass
class FixpointConfig:
    """Main configuration for the Fixpoint system."""
    interpreter: InterpreterConfig = None
    driver: DriverConfig = None
    verifier: VerifierConfig = None
    log_level: str = "INFO"

    def __post_init__(self):
        if self.interpreter is None:
            self.interpreter = InterpreterConfig()
        if self.driver is None:
            self.driver = DriverConfig()
        if self.verifier is None:
            self.verifier = VerifierConfig()


# Global configuration instance
_config: Optional[FixpointConfig] = None


def get_config() -> FixpointConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = FixpointConfig()
    return _config


def set_config(config: FixpointConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def setup_logging(level: str = "INFO") -> None:
    """Setup logging for Fixpoint."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
