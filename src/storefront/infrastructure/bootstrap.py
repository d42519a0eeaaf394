"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Callable

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from storefront.domain.gateway.notifier import Notifier
from storefront.domain.gateway.payment_provider import PaymentProvider
from storefront.domain.repository.lease_store import LeaseStore
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.coupon_evaluator import CouponEvaluator
from storefront.domain.service.payment_confirmation import PaymentConfirmationService
from storefront.domain.service.reservation_manager import ReservationManager
from storefront.infrastructure.config import Settings, load_settings
from storefront.infrastructure.lease.redis_lease_store import RedisLeaseStore
from storefront.infrastructure.notifications.logging_notifier import LoggingNotifier
from storefront.infrastructure.payments.razorpay_provider import RazorpayProvider
from storefront.infrastructure.persistence.database import (
    create_schema,
    make_engine,
    make_session_factory,
)
from storefront.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork


@lru_cache(maxsize=1)
def settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def engine() -> Engine:
    return make_engine(settings().database_url)


@lru_cache(maxsize=1)
def session_factory() -> sessionmaker:
    return make_session_factory(engine())


def init_schema() -> None:
    create_schema(engine())


def uow_factory() -> Callable[[], UnitOfWork]:
    factory = session_factory()
    currency = settings().currency
    return lambda: SqlUnitOfWork(factory, currency)


@lru_cache(maxsize=1)
def lease_store() -> LeaseStore:
    return RedisLeaseStore.from_url(settings().redis_url)


def reservation_manager() -> ReservationManager:
    return ReservationManager(uow_factory(), lease_store(), ttl=settings().reservation_ttl)


def coupon_evaluator() -> CouponEvaluator:
    return CouponEvaluator(uow_factory())


def payment_confirmation() -> PaymentConfirmationService:
    return PaymentConfirmationService(uow_factory())


def payment_provider() -> PaymentProvider:
    s = settings()
    return RazorpayProvider(
        key_id=s.payment_key_id,
        key_secret=s.payment_key_secret,
        webhook_secret=s.payment_webhook_secret,
        api_url=s.payment_api_url,
        timeout=s.payment_timeout_seconds,
    )


def notifier() -> Notifier:
    return LoggingNotifier()
