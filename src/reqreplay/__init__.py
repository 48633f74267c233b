"""
reqreplay

Generate standalone scripts that replay a single captured HTTP request.

This package provides:
- Capture log loading and baseline extraction
- Replay script generation
- The replay script runtime (header/body/method/URL overrides, raw printing)
"""

from .baseline import CaptureLoader, baseline_from_capture, load_baseline
from .config import GeneratorConfig
from .exceptions import ReqReplayError, CaptureError, ConfigError
from .generator import ScriptGenerator
from .replay_script import RequestBaseline, EffectiveRequest

__all__ = [
    'CaptureLoader',
    'baseline_from_capture',
    'load_baseline',
    'GeneratorConfig',
    'ReqReplayError',
    'CaptureError',
    'ConfigError',
    'ScriptGenerator',
    'RequestBaseline',
    'EffectiveRequest',
]

__version__ = '1.0.0'
