"""Trajectory animation engine."""

from pyfleet.animation.frames import AsyncioFrameClock, FrameCallback, FrameClock, ManualFrameClock
from pyfleet.animation.interpolate import interpolate
from pyfleet.animation.loop import VehicleAnimation
from pyfleet.animation.refine import refine_or_fallback
from pyfleet.animation.scheduler import AnimationScheduler
from pyfleet.animation.status import classify_status

__all__ = [
    "AnimationScheduler",
    "AsyncioFrameClock",
    "FrameCallback",
    "FrameClock",
    "ManualFrameClock",
    "VehicleAnimation",
    "classify_status",
    "interpolate",
    "refine_or_fallback",
]
