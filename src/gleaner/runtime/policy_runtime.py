from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from gleaner.config import TomlTable, emission_enforce
from gleaner.invariants import EnforcementConfig, enforcement_scope, set_enforcement_config
from gleaner.runtime.env_policy import ENFORCE_ENV_KEY, env_optional_flag


@dataclass(frozen=True)
class RuntimePolicyConfig:
    enforce_emissions: bool = False


def runtime_policy_from_env() -> RuntimePolicyConfig:
    return RuntimePolicyConfig(
        enforce_emissions=bool(env_optional_flag(ENFORCE_ENV_KEY)),
    )


def runtime_policy_from_config(section: TomlTable | None) -> RuntimePolicyConfig:
    return RuntimePolicyConfig(enforce_emissions=bool(emission_enforce(section)))


def resolve_runtime_policy(
    *,
    enforce_flag: bool | None = None,
    section: TomlTable | None = None,
) -> RuntimePolicyConfig:
    """Layer an explicit flag over the environment over the TOML section."""
    for candidate in (
        enforce_flag,
        env_optional_flag(ENFORCE_ENV_KEY),
        emission_enforce(section),
    ):
        if candidate is not None:
            return RuntimePolicyConfig(enforce_emissions=bool(candidate))
    return RuntimePolicyConfig()


def apply_runtime_policy(config: RuntimePolicyConfig) -> None:
    set_enforcement_config(EnforcementConfig(enabled=config.enforce_emissions))


@contextmanager
def runtime_policy_scope(config: RuntimePolicyConfig) -> Iterator[None]:
    with enforcement_scope(config.enforce_emissions):
        yield
