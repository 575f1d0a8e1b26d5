# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import pytest
from pydantic import ValidationError

from proptraka.core.primitives import (
    AGEING_BUCKET_EDGES,
    CRITICAL_ARREARS_DAYS,
    ArrearsSettings,
    GlobalSettings,
    ScheduleSettings,
    TerminationSettings,
)


def test_global_settings_default_instantiation():
    """GlobalSettings composes the per-area defaults."""
    settings = GlobalSettings()
    assert isinstance(settings.arrears, ArrearsSettings)
    assert isinstance(settings.termination, TerminationSettings)
    assert isinstance(settings.schedule, ScheduleSettings)
    assert settings.arrears.critical_threshold_days == CRITICAL_ARREARS_DAYS == 30
    assert settings.arrears.severe_threshold_days == 60
    assert settings.arrears.ageing_bucket_edges == AGEING_BUCKET_EDGES
    assert settings.termination.allow_future_end_date is False
    assert settings.schedule.rent_due_day == 1


def test_global_settings_custom_instantiation():
    """Nested settings accept dictionaries as well as models."""
    settings = GlobalSettings(
        arrears={"critical_threshold_days": 14, "severe_threshold_days": 45},
        schedule=ScheduleSettings(rent_due_day=5),
    )
    assert settings.arrears.critical_threshold_days == 14
    assert settings.arrears.severe_threshold_days == 45
    assert settings.schedule.rent_due_day == 5


def test_settings_are_immutable():
    settings = ArrearsSettings()
    with pytest.raises(ValidationError):
        settings.critical_threshold_days = 10


def test_settings_reject_unknown_fields():
    with pytest.raises(ValidationError):
        ArrearsSettings(critical_days=10)


def test_severe_threshold_must_not_precede_critical():
    with pytest.raises(ValueError, match="severe_threshold_days must not be below"):
        ArrearsSettings(critical_threshold_days=60, severe_threshold_days=30)


@pytest.mark.parametrize("edges", [(), (60, 30), (30, 30, 90)])
def test_bucket_edges_must_be_strictly_increasing(edges):
    with pytest.raises(ValidationError):
        ArrearsSettings(ageing_bucket_edges=edges)


@pytest.mark.parametrize("day", [0, 32])
def test_rent_due_day_range(day):
    with pytest.raises(ValidationError):
        ScheduleSettings(rent_due_day=day)


def test_negative_threshold_rejected():
    with pytest.raises(ValidationError):
        ArrearsSettings(critical_threshold_days=-1)
