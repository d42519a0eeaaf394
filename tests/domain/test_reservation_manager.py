"""Unit tests for the ReservationManager domain service."""

import threading
from datetime import timedelta

import pytest

from storefront.domain.exceptions import (
    InsufficientStock,
    ReservationExpiredOrMissing,
    ValidationError,
)
from storefront.domain.service.reservation_manager import ReservationManager, merge_lines
from tests.fakes import (
    BrokenLeaseStore,
    FakeClock,
    FakeLeaseStore,
    FakeStockLedger,
    FakeUnitOfWork,
    cart_line,
)


def _setup(stock=None, lease_store=None):
    clock = FakeClock()
    uow = FakeUnitOfWork(stock=FakeStockLedger(stock or {"V1": 10, "V2": 5}))
    leases = lease_store or FakeLeaseStore(clock)
    manager = ReservationManager(uow, leases, ttl=timedelta(minutes=10), clock=clock)
    return manager, uow, leases, clock


def _held(uow, variant_id):
    return uow.stock.get(variant_id).held


class TestInitiateCheckout:

    def test_holds_every_line_and_writes_lease(self):
        manager, uow, leases, clock = _setup()
        uow.carts.add_line("u1", cart_line("V1", 3))
        uow.carts.add_line("u1", cart_line("V2", 2))

        reservation = manager.initiate_checkout("u1")

        assert _held(uow, "V1") == 3
        assert _held(uow, "V2") == 2
        assert reservation.expires_at == clock() + timedelta(minutes=10)
        assert manager.lookup(reservation.reservation_id).lines == reservation.lines

    def test_empty_cart_rejected(self):
        manager, _, leases, _ = _setup()
        with pytest.raises(ValidationError, match="Cart is empty"):
            manager.initiate_checkout("u1")
        assert len(leases) == 0

    def test_no_partial_holds_when_one_line_is_short(self):
        manager, uow, leases, _ = _setup({"V1": 10, "V2": 1})
        uow.carts.add_line("u1", cart_line("V1", 3))
        uow.carts.add_line("u1", cart_line("V2", 2))

        with pytest.raises(InsufficientStock) as exc_info:
            manager.initiate_checkout("u1")

        assert exc_info.value.variant_id == "V2"
        assert _held(uow, "V1") == 0
        assert _held(uow, "V2") == 0
        assert len(leases) == 0

    def test_unknown_variant_is_insufficient(self):
        manager, uow, _, _ = _setup()
        uow.carts.add_line("u1", cart_line("GHOST", 1))
        with pytest.raises(InsufficientStock):
            manager.initiate_checkout("u1")

    def test_holds_are_given_back_when_lease_write_fails(self):
        clock = FakeClock()
        manager, uow, _, _ = _setup(lease_store=BrokenLeaseStore(clock))
        uow.carts.add_line("u1", cart_line("V1", 3))

        with pytest.raises(ConnectionError):
            manager.initiate_checkout("u1")

        assert _held(uow, "V1") == 0


class TestLifecycle:

    def _reserve(self, manager, uow, qty=3):
        uow.carts.add_line("u1", cart_line("V1", qty))
        return manager.initiate_checkout("u1")

    def test_release_returns_units_once(self):
        manager, uow, _, _ = _setup()
        reservation = self._reserve(manager, uow)

        assert manager.release(reservation.reservation_id) is True
        assert manager.release(reservation.reservation_id) is False
        assert _held(uow, "V1") == 0
        assert uow.stock.get("V1").on_hand == 10

    def test_release_of_unknown_reservation_is_a_no_op(self):
        manager, uow, _, _ = _setup()
        assert manager.release("RES-nope") is False

    def test_lease_expiry_ends_the_reservation(self):
        manager, uow, _, clock = _setup()
        reservation = self._reserve(manager, uow)

        clock.advance(minutes=10)

        assert manager.lookup(reservation.reservation_id) is None
        with pytest.raises(ReservationExpiredOrMissing):
            manager.require(reservation.reservation_id)
        # The holds wait for reconciliation; release cannot find them.
        assert manager.release(reservation.reservation_id) is False

    def test_still_held_just_before_expiry(self):
        manager, uow, _, clock = _setup()
        reservation = self._reserve(manager, uow)
        clock.advance(minutes=9, seconds=59)
        assert manager.require(reservation.reservation_id).user_id == "u1"

    def test_mark_confirmed_retires_the_lease_without_touching_holds(self):
        manager, uow, _, _ = _setup()
        reservation = self._reserve(manager, uow)

        assert manager.mark_confirmed(reservation.reservation_id) is True

        assert manager.lookup(reservation.reservation_id) is None
        assert _held(uow, "V1") == 3
        assert manager.release(reservation.reservation_id) is False


class TestConcurrency:

    def test_parallel_reservations_never_oversell(self):
        manager, uow, _, _ = _setup({"V1": 5})
        users = [f"u{i}" for i in range(20)]
        for user in users:
            uow.carts.add_line(user, cart_line("V1", 1))

        won, lost = [], []

        def attempt(user):
            try:
                won.append(manager.initiate_checkout(user))
            except InsufficientStock:
                lost.append(user)

        threads = [threading.Thread(target=attempt, args=(u,)) for u in users]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(won) == 5
        assert len(lost) == 15
        assert _held(uow, "V1") == 5

    def test_parallel_releases_give_units_back_once(self):
        manager, uow, _, _ = _setup({"V1": 10})
        uow.carts.add_line("u1", cart_line("V1", 4))
        reservation = manager.initiate_checkout("u1")
        uow.stock.reserve("V1", 2)  # someone else's hold

        results = []
        threads = [
            threading.Thread(target=lambda: results.append(manager.release(reservation.reservation_id)))
            for _ in range(10)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 1
        assert _held(uow, "V1") == 2


def test_merge_lines_sums_and_sorts():
    lines = merge_lines([cart_line("V2", 1), cart_line("V1", 2), cart_line("V2", 3)])
    assert [(l.variant_id, l.quantity.value) for l in lines] == [("V1", 2), ("V2", 4)]
