"""Routing helpers for selecting the chat model provider.

The router only inspects configuration; it never instantiates SDK clients. A
provider is available when every environment variable it requires is set, so
"no provider available" is how the chat relay learns to use the template
fallback.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class ProviderSelection:
    """Returned details about the provider that should handle a task."""

    name: str
    model: str
    api_key_env: str
    base_url_env: Optional[str] = None
    default_base_url: Optional[str] = None
    max_tokens: int = 2048


class ModelRouter:
    """Simple policy-based router for the KT assistant."""

    PROVIDER_CONFIG: Dict[str, Dict[str, Optional[str] | bool]] = {
        # Hosted integration proxy: key and base URL must both be present.
        "integrations": {
            "api_key_env": "AI_INTEGRATIONS_OPENAI_API_KEY",
            "base_url_env": "AI_INTEGRATIONS_OPENAI_BASE_URL",
            "requires_base_url": True,
        },
        "openai": {
            "api_key_env": "OPENAI_API_KEY",
            "base_url_env": "OPENAI_BASE_URL",
            "default_base_url": "https://api.openai.com/v1",
            "requires_base_url": False,
        },
    }

    ROUTING_POLICY: Dict[str, tuple[str, ...]] = {
        "conversation": ("integrations", "openai"),
    }

    DEFAULT_MODEL = "gpt-4o"
    DEFAULT_MAX_TOKENS = 2048

    def __init__(self, env: Optional[Mapping[str, str]] = None) -> None:
        self._env = env if env is not None else os.environ
        preferred = (self._env.get("CODEKT_MODEL_PROVIDER") or "").strip().lower()
        self._preferred_provider = preferred if preferred in self.PROVIDER_CONFIG else None

    @property
    def env(self) -> Mapping[str, str]:
        return self._env

    def provider_available(self, provider: str) -> bool:
        cfg = self.PROVIDER_CONFIG.get(provider)
        if not cfg:
            return False
        if not self._env.get(str(cfg["api_key_env"])):
            return False
        if cfg.get("requires_base_url"):
            return bool(self._env.get(str(cfg["base_url_env"])))
        return True

    def _max_tokens(self) -> int:
        raw = (self._env.get("CODEKT_CHAT_MAX_TOKENS") or "").strip()
        try:
            return int(raw) if raw else self.DEFAULT_MAX_TOKENS
        except ValueError:
            return self.DEFAULT_MAX_TOKENS

    def _resolve_selection(self, provider: str) -> ProviderSelection:
        cfg = self.PROVIDER_CONFIG[provider]
        default_base_url = cfg.get("default_base_url")
        return ProviderSelection(
            name=provider,
            model=self._env.get("CODEKT_CHAT_MODEL") or self.DEFAULT_MODEL,
            api_key_env=str(cfg["api_key_env"]),
            base_url_env=str(cfg["base_url_env"]) if cfg.get("base_url_env") else None,
            default_base_url=str(default_base_url) if default_base_url else None,
            max_tokens=self._max_tokens(),
        )

    def select_provider(self, purpose: str = "conversation") -> ProviderSelection:
        """Return the provider selected for the supplied purpose.

        Raises
        ------
        RuntimeError
            If no provider configured for the purpose has credentials.
        """

        priority = list(self.ROUTING_POLICY.get(purpose, self.ROUTING_POLICY["conversation"]))
        if self._preferred_provider:
            priority = [self._preferred_provider] + [p for p in priority if p != self._preferred_provider]
        for provider in priority:
            if self.provider_available(provider):
                return self._resolve_selection(provider)
        raise RuntimeError("No active model provider available for this task.")

    def maybe_select_provider(self, purpose: str = "conversation") -> Optional[ProviderSelection]:
        """Like :meth:`select_provider` but returns ``None`` on failure."""

        try:
            return self.select_provider(purpose)
        except RuntimeError:
            return None
