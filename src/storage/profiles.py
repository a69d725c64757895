"""Profile directory lookup and loading.

Profiles live under a root directory (default `<repo>/profiles`), one
sub-directory per profile. The root can be moved with the
CASH_JAR_PROFILES_DIR environment variable.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from calc.income_tracker import IncomeTracker
from calc.savings_tracker import SavingsTracker
from storage.snapshot_store import SnapshotStore, INCOME_FILE, SAVINGS_FILE


PROFILES_ENV_VAR = 'CASH_JAR_PROFILES_DIR'
DEFAULT_PROFILES_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'profiles'))


def profiles_root(override: Optional[str] = None) -> str:
    """Resolve the profiles root: explicit override, then env var, then the default."""
    return override or os.environ.get(PROFILES_ENV_VAR) or DEFAULT_PROFILES_DIR


def list_profiles(root: Optional[str] = None) -> List[str]:
    """Names of profile directories that hold at least one snapshot file."""
    root = profiles_root(root)
    if not os.path.isdir(root):
        return []
    names = []
    for name in sorted(os.listdir(root)):
        path = os.path.join(root, name)
        if not os.path.isdir(path):
            continue
        if os.path.exists(os.path.join(path, INCOME_FILE)) or os.path.exists(os.path.join(path, SAVINGS_FILE)):
            names.append(name)
    return names


@dataclass
class Profile:
    """A loaded profile: its store plus the two aggregates built from it."""
    name: str
    store: SnapshotStore
    income: IncomeTracker
    savings: SavingsTracker

    def save(self) -> None:
        self.store.save_income(self.income.to_snapshot())
        self.store.save_savings(self.savings.to_snapshot())


def load_profile(name: str, root: Optional[str] = None, must_exist: bool = True) -> Profile:
    """Load a profile's snapshots into fresh aggregates.

    Unreadable snapshot files produce empty aggregates.

    Raises:
        FileNotFoundError: If must_exist is set and the profile directory is missing
    """
    path = os.path.join(profiles_root(root), name)
    if must_exist and not os.path.isdir(path):
        raise FileNotFoundError(f"Profile not found: {path}")
    store = SnapshotStore(path)
    return Profile(
        name=name,
        store=store,
        income=IncomeTracker(store.load_income()),
        savings=SavingsTracker(store.load_savings()),
    )
