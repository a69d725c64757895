"""Cash Jar Planner Tools for MCP Server.

This module provides the tool implementations that wrap the income and
savings aggregates of a profile and expose their data through MCP.
"""

import os
import sys
import logging
from datetime import date
from typing import Dict, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from calc.dates import parse_month, to_day, week_start_from_name
from calc.savings_schedule import estimated_duration_text, is_goal_complete, upcoming_payments
from model.SavingsData import SavingsGoal
from storage.profiles import Profile, list_profiles, load_profile, profiles_root


logger = logging.getLogger(__name__)


def _money(value: float) -> float:
    return round(value, 2)


class ProfileTools:
    """Tools that read and update one profile's income and savings data."""

    def __init__(self, root: str, profile_name: str):
        """Load the profile's snapshots.

        Args:
            root: Directory holding the profile folders
            profile_name: Name of the profile folder
        """
        self.root = root
        self.profile_name = profile_name
        self.profile: Profile = load_profile(profile_name, root)

    def _save(self):
        """Persist the profile; on failure the cached profile is reloaded from disk."""
        try:
            self.profile.save()
        except OSError as e:
            logger.error("Failed to save profile '%s': %s", self.profile_name, e)
            self.profile = load_profile(self.profile_name, self.root)
            raise

    def get_income_summary(self, use_net: bool = False) -> dict:
        """Projected monthly income plus every income source."""
        income = self.profile.income
        summary = income.summary()
        return {
            "profile": self.profile_name,
            "basis": "net" if use_net else "gross",
            "monthly": {
                "jobs": _money(summary.jobs_net if use_net else summary.jobs_gross),
                "passive": _money(summary.passive_net if use_net else summary.passive_gross),
                "total": _money(summary.total(use_net)),
            },
            "jobs": [
                {
                    "id": job.id,
                    "name": job.name,
                    "type": job.type.value,
                    "interval_days": job.interval_days,
                    "per_period": _money(job.projected_net_per_period() if use_net else job.projected_gross_per_period()),
                    "per_month": _money(job.projected_net_per_month() if use_net else job.projected_gross_per_month()),
                }
                for job in income.jobs
            ],
            "passive_incomes": [
                {
                    "id": item.id,
                    "name": item.name,
                    "interval_days": item.interval_days,
                    "per_period": _money(item.projected_net_per_period() if use_net else item.projected_gross_per_period()),
                    "per_month": _money(item.projected_net_per_month() if use_net else item.projected_gross_per_month()),
                }
                for item in income.passive_incomes
            ],
            "one_time_incomes": [
                {
                    "id": item.id,
                    "name": item.name,
                    "date": item.date.isoformat(),
                    "amount": _money(income.non_recurring_amount(item.id, use_net)),
                }
                for item in income.non_recurring_incomes
            ],
        }

    def get_month_calendar(self, month: Optional[str] = None, use_net: bool = False,
                           week_start: str = 'sunday') -> dict:
        """Income events of one month (YYYY-MM, default current) grouped by week."""
        if month:
            year, month_number = parse_month(month)
        else:
            today = date.today()
            year, month_number = today.year, today.month
        calendar = self.profile.income.month_calendar(
            year, month_number, use_net, week_start_from_name(week_start)
        )
        return {
            "profile": self.profile_name,
            "month": f"{year:04d}-{month_number:02d}",
            "basis": "net" if use_net else "gross",
            "weeks": [
                {
                    "start": week.span.start.isoformat(),
                    "end": week.span.end.isoformat(),
                    "total": _money(week.total),
                    "events": [
                        {
                            "date": event.day.isoformat(),
                            "name": event.name,
                            "amount": _money(event.amount),
                            "kind": event.source.kind.value,
                            "source_id": event.source.entity_id,
                        }
                        for event in week.events
                    ],
                }
                for week in calendar.weeks
            ],
            "total": _money(calendar.total),
        }

    def _goal_info(self, goal: SavingsGoal, max_payments: int) -> dict:
        info = {
            "id": goal.id,
            "name": goal.name,
            "target_amount": _money(goal.target_amount),
            "current_saved": _money(goal.current_saved),
            "remaining": _money(goal.remaining),
            "progress": round(goal.progress, 4),
            "complete": is_goal_complete(goal),
            "has_schedule": goal.has_active_schedule,
        }
        if goal.has_active_schedule:
            info["schedule"] = {
                "amount": _money(goal.schedule_amount),
                "interval_days": goal.interval_days,
                "start_date": goal.start_date.isoformat() if goal.start_date else None,
                "estimate": estimated_duration_text(goal.remaining, goal.schedule_amount, goal.interval_days),
            }
            info["upcoming_payments"] = [
                {"date": entry.date.isoformat(), "amount": _money(entry.amount)}
                for entry in upcoming_payments(goal, max_payments)
            ]
        return info

    def get_goal_plan(self, goal_id: Optional[str] = None, max_payments: int = 10) -> dict:
        """Savings goals with progress and their next planned payments."""
        savings = self.profile.savings
        goals = [savings.get_goal(goal_id)] if goal_id else savings.goals
        return {
            "profile": self.profile_name,
            "goals": [self._goal_info(goal, max_payments) for goal in goals],
        }

    def set_job_override(self, job_id: str, pay_date: str,
                         amount: Optional[float] = None,
                         hours: Optional[float] = None) -> dict:
        """Override one pay period of a job and persist the profile."""
        income = self.profile.income
        day = to_day(pay_date)
        override = income.set_job_override(job_id, day, amount, hours)
        self._save()
        return {
            "status": "success" if override else "cleared",
            "job_id": job_id,
            "pay_date": day.isoformat(),
            "override_amount": override.override_amount if override else None,
            "override_hours_worked": override.override_hours_worked if override else None,
            "gross": _money(income.job_amount(job_id, day)),
            "net": _money(income.job_amount(job_id, day, use_net=True)),
        }

    def clear_job_override(self, job_id: str, pay_date: str) -> dict:
        income = self.profile.income
        income.get_job(job_id)
        day = to_day(pay_date)
        removed = income.clear_job_override(job_id, day)
        if removed:
            self._save()
        return {
            "status": "cleared" if removed else "not_found",
            "job_id": job_id,
            "pay_date": day.isoformat(),
            "gross": _money(income.job_amount(job_id, day)),
        }

    def add_goal_money(self, goal_id: str, amount: float) -> dict:
        """Put money into a goal, consuming planned entries earliest first."""
        goal = self.profile.savings.add_money(goal_id, amount)
        self._save()
        return {"status": "success", "goal": self._goal_info(goal, 10)}

    def remove_goal_money(self, goal_id: str, amount: float) -> dict:
        """Take money out of a goal, returning it to the plan latest first."""
        goal = self.profile.savings.remove_money(goal_id, amount)
        self._save()
        return {"status": "success", "goal": self._goal_info(goal, 10)}


class MultiProfileTools:
    """Manager for multiple profiles.

    Discovers all available profiles and caches their aggregates,
    allowing queries to specify which profile to use.
    """

    def __init__(self, root: Optional[str] = None, default_profile: Optional[str] = None):
        """Initialize and discover all available profiles.

        Args:
            root: Directory holding the profile folders (default from environment)
            default_profile: Default profile to use when none specified
        """
        self.root = profiles_root(root)
        self.profiles: Dict[str, ProfileTools] = {}
        self.default_profile = default_profile
        self._discover_profiles()

    def _discover_profiles(self):
        for name in list_profiles(self.root):
            try:
                self.profiles[name] = ProfileTools(self.root, name)
            except OSError as e:
                logger.warning("Failed to load profile '%s': %s", name, e)

        if self.default_profile is None and self.profiles:
            self.default_profile = list(self.profiles.keys())[0]

    def _get_profile(self, profile: Optional[str] = None) -> ProfileTools:
        profile_name = profile or self.default_profile
        if profile_name not in self.profiles:
            available = list(self.profiles.keys())
            raise ValueError(
                f"Profile '{profile_name}' not found. Available profiles: {available}"
            )
        return self.profiles[profile_name]

    def list_profiles(self) -> dict:
        """List all available profiles."""
        profiles_info = {}
        for name, tools in self.profiles.items():
            profiles_info[name] = {
                "jobs": len(tools.profile.income.jobs),
                "passive_incomes": len(tools.profile.income.passive_incomes),
                "one_time_incomes": len(tools.profile.income.non_recurring_incomes),
                "goals": len(tools.profile.savings.goals),
            }
        return {
            "available_profiles": list(self.profiles.keys()),
            "default_profile": self.default_profile,
            "profiles_info": profiles_info,
        }

    def reload_profiles(self) -> dict:
        """Reload all profiles from disk, refreshing the cache."""
        old_profiles = set(self.profiles.keys())
        self.profiles.clear()
        if self.default_profile not in list_profiles(self.root):
            self.default_profile = None
        self._discover_profiles()
        new_profiles = set(self.profiles.keys())
        return {
            "status": "success",
            "message": f"Reloaded {len(self.profiles)} profiles",
            "profiles_loaded": list(self.profiles.keys()),
            "default_profile": self.default_profile,
            "changes": {
                "added": sorted(new_profiles - old_profiles),
                "removed": sorted(old_profiles - new_profiles),
                "reloaded": sorted(old_profiles & new_profiles),
            },
        }

    def get_income_summary(self, use_net: bool = False, profile: Optional[str] = None) -> dict:
        return self._get_profile(profile).get_income_summary(use_net)

    def get_month_calendar(self, month: Optional[str] = None, use_net: bool = False,
                           week_start: str = 'sunday', profile: Optional[str] = None) -> dict:
        return self._get_profile(profile).get_month_calendar(month, use_net, week_start)

    def get_goal_plan(self, goal_id: Optional[str] = None, max_payments: int = 10,
                      profile: Optional[str] = None) -> dict:
        return self._get_profile(profile).get_goal_plan(goal_id, max_payments)

    def set_job_override(self, job_id: str, pay_date: str, amount: Optional[float] = None,
                         hours: Optional[float] = None, profile: Optional[str] = None) -> dict:
        return self._get_profile(profile).set_job_override(job_id, pay_date, amount, hours)

    def clear_job_override(self, job_id: str, pay_date: str, profile: Optional[str] = None) -> dict:
        return self._get_profile(profile).clear_job_override(job_id, pay_date)

    def add_goal_money(self, goal_id: str, amount: float, profile: Optional[str] = None) -> dict:
        return self._get_profile(profile).add_goal_money(goal_id, amount)

    def remove_goal_money(self, goal_id: str, amount: float, profile: Optional[str] = None) -> dict:
        return self._get_profile(profile).remove_goal_money(goal_id, amount)
