#!/usr/bin/env python3
"""
Schedule endpoints - the student's schedule entries and availability.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.config_loader import AppConfig
from database.repository import MatchEngineRepository

from ..auth import SessionUser, SCHEDULE_FEATURE
from ..config import get_config
from ..dependencies import get_repo, require_feature
from ..services.schedule_service import ScheduleService
from ..models.requests import ScheduleCreateRequest
from ..models.responses import (
    SchedulesResponse,
    ScheduleCreatedResponse,
    AvailabilityResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/match-engine", tags=["schedules"])

schedule_user = require_feature(SCHEDULE_FEATURE)


@router.get("/schedules", response_model=SchedulesResponse, response_model_by_alias=True)
def list_schedules(
    user: SessionUser = Depends(schedule_user),
    repo: MatchEngineRepository = Depends(get_repo),
    config: AppConfig = Depends(get_config)
):
    """List the current student's schedule entries, newest first."""
    service = ScheduleService(repo, config)
    return SchedulesResponse(schedules=service.list_schedules(user))


@router.post(
    "/schedules",
    response_model=ScheduleCreatedResponse,
    response_model_by_alias=True,
    status_code=201
)
def create_schedule(
    body: ScheduleCreateRequest,
    user: SessionUser = Depends(schedule_user),
    repo: MatchEngineRepository = Depends(get_repo),
    config: AppConfig = Depends(get_config)
):
    """
    Add a schedule entry.

    Every cached score of the student is flagged stale and a sweep is
    queued so the worker recomputes them.
    """
    service = ScheduleService(repo, config)
    schedule, invalidated = service.create_schedule(user, body)
    return ScheduleCreatedResponse(schedule=schedule, invalidated_scores=invalidated)


def _availability(user, repo, config, start_date, end_date) -> AvailabilityResponse:
    service = ScheduleService(repo, config)
    return service.get_availability(user, start_date, end_date)


@router.get("/schedules/availability", response_model=AvailabilityResponse, response_model_by_alias=True)
def schedule_availability(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    user: SessionUser = Depends(schedule_user),
    repo: MatchEngineRepository = Depends(get_repo),
    config: AppConfig = Depends(get_config)
):
    """Weekly availability windows; defaults to today through six months out."""
    return _availability(user, repo, config, start_date, end_date)


@router.get("/availability", response_model=AvailabilityResponse, response_model_by_alias=True)
def availability(
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    user: SessionUser = Depends(schedule_user),
    repo: MatchEngineRepository = Depends(get_repo),
    config: AppConfig = Depends(get_config)
):
    return _availability(user, repo, config, start_date, end_date)
