"""
Configuration for the trust engine.

Sources, later wins:
1. Built-in defaults (TrustPolicy field defaults)
2. YAML policy file (TRUSTLEDGER_POLICY_FILE, default trust_policy.yaml)
3. TRUSTLEDGER_* environment variables (.env is loaded first)
"""

import os
import yaml
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .models.client import INITIAL_TRUST

load_dotenv()

POLICY_FILE = Path(os.getenv("TRUSTLEDGER_POLICY_FILE", "trust_policy.yaml"))
BACKEND = os.getenv("TRUSTLEDGER_BACKEND", "memory").strip().lower()
DATA_DIR = Path(os.getenv("TRUSTLEDGER_DATA_DIR", "data"))

# Policy field -> environment variable
_ENV_OVERRIDES = {
    "initial_trust": "TRUSTLEDGER_INITIAL_TRUST",
    "edit_tolerance": "TRUSTLEDGER_EDIT_TOLERANCE",
    "vote_weight_cap": "TRUSTLEDGER_VOTE_WEIGHT_CAP",
    "vote_weight_ramp": "TRUSTLEDGER_VOTE_WEIGHT_RAMP",
    "agreement_discount": "TRUSTLEDGER_AGREEMENT_DISCOUNT",
    "legacy_vote_weight": "TRUSTLEDGER_LEGACY_VOTE_WEIGHT",
}


class TrustPolicy(BaseModel):
    """
    Tunable constants of the scoring and gating rules.

    vote_weight_cap / vote_weight_ramp shape the linear growth weight:
    it reaches the cap after vote_weight_ramp votes and stays flat.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    initial_trust: float = Field(default=INITIAL_TRUST, ge=0.0, le=1.0)
    edit_tolerance: float = Field(default=0.05, ge=0.0, le=1.0)
    vote_weight_cap: float = Field(default=0.95, gt=0.0, le=1.0)
    vote_weight_ramp: float = Field(default=5.0, gt=0.0)
    agreement_discount: float = Field(default=0.75, ge=0.0, le=1.0)
    legacy_vote_weight: float = Field(default=0.5, ge=0.0, le=1.0)


def _read_policy_file(path: Path) -> dict:
    if not path.exists():
        return {}
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    # Allow either a bare mapping or one nested under "trust"
    return data.get("trust", data)


def load_policy(path: Optional[Path] = None) -> TrustPolicy:
    """Build the policy from defaults, the YAML file and the environment."""
    values = _read_policy_file(path or POLICY_FILE)
    for field, env_var in _ENV_OVERRIDES.items():
        raw = os.getenv(env_var)
        if raw is not None and raw.strip():
            values[field] = raw.strip()
    return TrustPolicy.model_validate(values)


_policy: Optional[TrustPolicy] = None


def get_policy() -> TrustPolicy:
    """Get the process-wide policy, loading it on first use."""
    global _policy
    if _policy is None:
        _policy = load_policy()
    return _policy


def reset_policy() -> None:
    """Forget the cached policy so the next get_policy() reloads it."""
    global _policy
    _policy = None
