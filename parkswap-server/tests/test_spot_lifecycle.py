from datetime import timedelta

import pytest
from sqlalchemy import select

from app.db.models import Account, Spot, SwapTransaction, utcnow
from app.modules.accounts import AccountService
from app.modules.spots import (
    ActiveSpotExistsError,
    BookingRequest,
    NotBookerError,
    NotHostError,
    PlateMismatchError,
    SessionMismatchError,
    SpotNotBookedError,
    SpotProposal,
    SpotService,
)


@pytest.fixture
def spots(session) -> SpotService:
    return SpotService.with_session(session)


async def _domain(session, account: Account):
    return await AccountService.with_session(session).get_by_id(account.id)


async def _booked_spot(session, spots, host, booker, **fields) -> str:
    fields.setdefault("vehicle_plate", "AA-111-AA")
    record = await spots.propose_spot(await _domain(session, host), SpotProposal(**fields))
    await spots.book_spot(
        booker.id,
        BookingRequest(
            spot_id=record.id,
            booking_session_id="sess",
            booker_name=booker.display_name,
            booker_vehicle_plate="bb 222 bb",
        ),
    )
    return record.id


async def test_host_can_only_have_one_active_spot(session, spots, make_account):
    host = await make_account("busy")
    domain_host = await _domain(session, host)
    await spots.propose_spot(domain_host, SpotProposal(time=5))

    with pytest.raises(ActiveSpotExistsError):
        await spots.propose_spot(domain_host, SpotProposal(time=5))


async def test_proposing_records_started_history(session, spots, make_account):
    host = await make_account("starter", display_name="Sam")
    record = await spots.propose_spot(await _domain(session, host), SpotProposal(price="1"))

    row = await session.get(SwapTransaction, f"{record.id}-{host.id}")
    assert row.status == "started"
    assert row.role == "host"
    assert row.title == "Sam"


async def test_free_navigation_moves_one_premium_park_to_host(session, spots, make_account):
    host = await make_account("nav-host", premium_parks=5)
    booker = await make_account("nav-booker", premium_parks=3, display_name="Nina")
    spot_id = await _booked_spot(session, spots, host, booker)

    result = await spots.start_navigation(spot_id, await _domain(session, booker), booking_session_id="sess")

    assert result.premium_parks_delta_applied is True
    assert (result.booker_before, result.booker_after) == (3, 2)
    assert result.host_after == 5
    assert result.host_delta == 0
    assert booker.premium_parks == 2
    assert booker.premium_parks_initialized is True

    spot = await session.get(Spot, spot_id)
    assert spot.booker_accepted is True
    assert spot.nav_op_id
    assert spot.premium_parks_booker_delta == -1
    assert spot.booker_name == "Nina"

    again = await spots.start_navigation(spot_id, await _domain(session, booker))
    assert again.premium_parks_delta_applied is False
    assert booker.premium_parks == 2


async def test_navigation_rewards_host_below_maximum(session, spots, make_account):
    host = await make_account("nav-host2", premium_parks=1)
    booker = await make_account("nav-booker2")
    spot_id = await _booked_spot(session, spots, host, booker)

    result = await spots.start_navigation(spot_id, await _domain(session, booker))

    assert result.host_delta == 1
    assert host.premium_parks == 2
    assert booker.premium_parks == 4


async def test_navigation_guards(session, spots, make_account):
    host = await make_account("guard-host")
    booker = await make_account("guard-booker")
    stranger = await make_account("guard-stranger")
    spot_id = await _booked_spot(session, spots, host, booker)

    with pytest.raises(NotBookerError):
        await spots.start_navigation(spot_id, await _domain(session, stranger))
    with pytest.raises(SessionMismatchError):
        await spots.start_navigation(spot_id, await _domain(session, booker), booking_session_id="other")

    record = await spots.propose_spot(await _domain(session, stranger), SpotProposal())
    with pytest.raises(SpotNotBookedError):
        await spots.start_navigation(record.id, await _domain(session, booker))


async def test_plate_confirmation_from_both_sides_completes_the_swap(session, spots, make_account):
    host = await make_account("plate-host", display_name="Hal")
    booker = await make_account("plate-booker")
    spot_id = await _booked_spot(session, spots, host, booker)

    with pytest.raises(PlateMismatchError):
        await spots.confirm_booker_plate(spot_id, host.id, "ZZ-999-ZZ")

    first = await spots.confirm_booker_plate(spot_id, host.id, "BB-222-BB", "sess")
    assert (first.ok, first.finalized) == (True, False)
    repeat = await spots.confirm_booker_plate(spot_id, host.id, "bb222bb")
    assert repeat.already is True

    second = await spots.confirm_host_plate(spot_id, booker.id, "aa111aa")
    assert second.finalized is True

    spot = await session.get(Spot, spot_id)
    assert spot.status == "completed"
    assert spot.plate_confirmed is True
    assert spot.completed_at is not None

    rows = (await session.execute(select(SwapTransaction).where(SwapTransaction.spot_id == spot_id))).scalars().all()
    assert {row.status for row in rows} == {"concluded"}
    await session.refresh(host)
    await session.refresh(booker)
    assert host.transactions == 1
    assert booker.transactions == 1

    replay = await spots.confirm_host_plate(spot_id, booker.id, "AA111AA")
    assert replay.already is True
    await session.refresh(booker)
    assert booker.transactions == 1


async def test_plate_confirmation_roles(session, spots, make_account):
    host = await make_account("role-host")
    booker = await make_account("role-booker")
    spot_id = await _booked_spot(session, spots, host, booker)

    with pytest.raises(NotHostError):
        await spots.confirm_booker_plate(spot_id, booker.id, "BB222BB")
    with pytest.raises(NotBookerError):
        await spots.confirm_host_plate(spot_id, host.id, "AA111AA")


async def test_cancel_without_booker_deletes_the_spot(session, spots, make_account):
    host = await make_account("quitter")
    record = await spots.propose_spot(await _domain(session, host), SpotProposal())

    result = await spots.cancel_spot(record.id, host.id)

    assert result.deleted is True
    assert await session.get(Spot, record.id) is None


async def test_host_cancelling_a_booked_spot_loses_a_premium_park(session, spots, make_account):
    host = await make_account("cancel-host", premium_parks=2)
    booker = await make_account("cancel-booker", display_name="Cleo")
    spot_id = await _booked_spot(session, spots, host, booker)

    result = await spots.cancel_spot(spot_id, host.id)

    assert result.status == "cancelled"
    assert host.premium_parks == 1
    spot = await session.get(Spot, spot_id)
    assert spot.status == "cancelled"
    assert spot.booker_id is None
    assert spot.cancelled_for == booker.id
    assert spot.cancelled_for_name == "Cleo"
    assert spot.cancelled_by_role == "host"
    assert spot.premium_parks_host_delta == -1
    assert spot.premium_parks_host_after == 1


async def test_cancel_booking_outcomes(session, spots, make_account):
    host = await make_account("cb-host")
    booker = await make_account("cb-booker")
    stranger = await make_account("cb-stranger")
    spot_id = await _booked_spot(session, spots, host, booker)

    assert (await spots.cancel_booking("missing", booker.id)).skipped is True
    with pytest.raises(NotBookerError):
        await spots.cancel_booking(spot_id, stranger.id)
    assert (await spots.cancel_booking(spot_id, booker.id, "old-session")).stale is True

    released = await spots.cancel_booking(spot_id, booker.id, "sess")
    assert released.status == "available"
    spot = await session.get(Spot, spot_id)
    assert spot.booker_id is None
    assert spot.booking_session_id is None

    assert (await spots.cancel_booking(spot_id, booker.id)).already is True


async def test_expire_and_renew(session, spots, make_account):
    host = await make_account("renewer")
    record = await spots.propose_spot(await _domain(session, host), SpotProposal(time=5))
    spot = await session.get(Spot, record.id)
    spot.created_at = utcnow() - timedelta(minutes=10)
    await session.flush()

    assert await spots.expire_spots() == 1
    assert spot.status == "expired"
    assert await spots.expire_spots() == 0

    renewed = await spots.renew_spot(record.id, host.id)
    assert renewed.status == "available"
    assert spot.status == "available"
    assert await spots.expire_spots() == 0


async def test_listing_without_duration_never_expires(session, spots, make_account):
    host = await make_account("forever")
    record = await spots.propose_spot(await _domain(session, host), SpotProposal())
    spot = await session.get(Spot, record.id)
    spot.created_at = utcnow() - timedelta(days=3)
    await session.flush()

    assert await spots.expire_spots() == 0


async def test_complete_swap_by_host(session, spots, make_account):
    host = await make_account("finisher")
    booker = await make_account("finished")
    spot_id = await _booked_spot(session, spots, host, booker)

    with pytest.raises(NotHostError):
        await spots.complete_swap(spot_id, booker.id)
    assert (await spots.complete_swap(spot_id, host.id)).status == "completed"
    assert (await spots.complete_swap(spot_id, host.id)).already is True
