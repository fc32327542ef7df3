"""ACME challenge hooks."""

from dnshook.challenges.base import ChallengeHook
from dnshook.challenges.dns01 import DnsChallengeHook

__all__ = ["ChallengeHook", "DnsChallengeHook"]
