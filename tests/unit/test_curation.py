"""Unit tests for collections, global collections and product media."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from libs.common.errors import (
    DuplicateMember,
    Forbidden,
    NotEligible,
    NotFound,
    SlugTaken,
)
from services.store_service.models import (
    CollectionProduct,
    GlobalCollectionProduct,
    MediaType,
    ProductStatus,
)
from services.store_service.services import curation
from sqlalchemy import func, select
from tests.factories import GlobalCollectionFactory, ProductFactory, StoreFactory

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _make_store(db, **product_overrides):
    store = StoreFactory.create()
    product = ProductFactory.create(store_id=store.id, **product_overrides)
    db.add(store)
    db.add(product)
    await db.commit()
    return store, product


async def _make_global_collection(db, **overrides):
    collection = GlobalCollectionFactory.create(**overrides)
    db.add(collection)
    await db.commit()
    return collection


# ---------------------------------------------------------------------------
# Store collections
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_collections_in_append_order(db_session):
    store, _ = await _make_store(db_session)

    first = await curation.create_collection(db_session, store.seller_id, name="New")
    second = await curation.create_collection(
        db_session, store.seller_id, name="Sale", description="Discounted"
    )

    assert (first.order_index, second.order_index) == (0, 1)
    assert second.store_id == store.id
    collections = await curation.list_store_collections(
        db_session, store.seller_id, store.id
    )
    assert [c.name for c in collections] == ["New", "Sale"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_collection_requires_store(db_session):
    with pytest.raises(Forbidden):
        await curation.create_collection(db_session, "not-a-seller", name="X")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_list_collections_of_another_store_is_forbidden(db_session):
    store_a, _ = await _make_store(db_session)
    store_b, _ = await _make_store(db_session)

    with pytest.raises(Forbidden):
        await curation.list_store_collections(db_session, store_a.seller_id, store_b.id)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_add_and_remove_collection_products(db_session):
    store, product = await _make_store(db_session)
    other = ProductFactory.create(store_id=store.id, title="Second")
    db_session.add(other)
    await db_session.commit()
    collection = await curation.create_collection(
        db_session, store.seller_id, name="Picks"
    )

    first = await curation.add_product_to_collection(
        db_session, store.seller_id, collection.id, product.id
    )
    second = await curation.add_product_to_collection(
        db_session, store.seller_id, collection.id, other.id
    )
    removed = await curation.remove_product_from_collection(
        db_session, store.seller_id, collection.id, product.id
    )

    assert (first.order_index, second.order_index) == (0, 1)
    assert removed is True
    members = await curation.list_collection_products(db_session, collection.id)
    assert [m.product_id for m in members] == [other.id]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_add_duplicate_collection_product(db_session):
    store, product = await _make_store(db_session)
    collection = await curation.create_collection(db_session, store.seller_id, name="A")
    await curation.add_product_to_collection(
        db_session, store.seller_id, collection.id, product.id
    )

    with pytest.raises(DuplicateMember):
        await curation.add_product_to_collection(
            db_session, store.seller_id, collection.id, product.id
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_add_product_from_another_store_is_not_found(db_session):
    store_a, _ = await _make_store(db_session)
    _, foreign_product = await _make_store(db_session)
    collection = await curation.create_collection(
        db_session, store_a.seller_id, name="Mine"
    )

    with pytest.raises(NotFound):
        await curation.add_product_to_collection(
            db_session, store_a.seller_id, collection.id, foreign_product.id
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_modify_another_sellers_collection_is_forbidden(db_session):
    store_a, product_a = await _make_store(db_session)
    store_b, _ = await _make_store(db_session)
    collection = await curation.create_collection(
        db_session, store_a.seller_id, name="A's"
    )

    with pytest.raises(Forbidden):
        await curation.add_product_to_collection(
            db_session, store_b.seller_id, collection.id, product_a.id
        )
    with pytest.raises(Forbidden):
        await curation.remove_product_from_collection(
            db_session, store_b.seller_id, collection.id, product_a.id
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unknown_collection_not_found(db_session):
    store, product = await _make_store(db_session)

    with pytest.raises(NotFound):
        await curation.list_collection_products(db_session, uuid.uuid4())
    with pytest.raises(NotFound):
        await curation.add_product_to_collection(
            db_session, store.seller_id, uuid.uuid4(), product.id
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_collection_keeps_sibling_order(db_session):
    store, product = await _make_store(db_session)
    first = await curation.create_collection(db_session, store.seller_id, name="A")
    middle = await curation.create_collection(db_session, store.seller_id, name="B")
    last = await curation.create_collection(db_session, store.seller_id, name="C")
    await curation.add_product_to_collection(
        db_session, store.seller_id, middle.id, product.id
    )

    await curation.delete_collection(db_session, store.seller_id, middle.id)
    appended = await curation.create_collection(db_session, store.seller_id, name="D")

    collections = await curation.list_store_collections(
        db_session, store.seller_id, store.id
    )
    assert [(c.id, c.order_index) for c in collections] == [
        (first.id, 0),
        (last.id, 2),
        (appended.id, 3),
    ]
    memberships = await db_session.execute(
        select(func.count())
        .select_from(CollectionProduct)
        .where(CollectionProduct.collection_id == middle.id)
    )
    assert memberships.scalar_one() == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_collection_requires_ownership(db_session):
    store_a, _ = await _make_store(db_session)
    store_b, _ = await _make_store(db_session)
    collection = await curation.create_collection(
        db_session, store_a.seller_id, name="A's"
    )

    with pytest.raises(Forbidden):
        await curation.delete_collection(db_session, store_b.seller_id, collection.id)
    with pytest.raises(NotFound):
        await curation.delete_collection(db_session, store_a.seller_id, uuid.uuid4())

    remaining = await curation.list_store_collections(
        db_session, store_a.seller_id, store_a.id
    )
    assert [c.id for c in remaining] == [collection.id]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_product_collection_ids(db_session):
    store, product = await _make_store(db_session)
    other_store, _ = await _make_store(db_session)
    picks = await curation.create_collection(db_session, store.seller_id, name="Picks")
    await curation.create_collection(db_session, store.seller_id, name="Empty")
    sale = await curation.create_collection(db_session, store.seller_id, name="Sale")
    for collection in (picks, sale):
        await curation.add_product_to_collection(
            db_session, store.seller_id, collection.id, product.id
        )

    ids = await curation.list_product_collection_ids(
        db_session, store.seller_id, product.id
    )

    assert set(ids) == {picks.id, sale.id}
    with pytest.raises(Forbidden):
        await curation.list_product_collection_ids(
            db_session, other_store.seller_id, product.id
        )
    with pytest.raises(NotFound):
        await curation.list_product_collection_ids(
            db_session, store.seller_id, uuid.uuid4()
        )


# ---------------------------------------------------------------------------
# Global collections
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_global_collection_accepts_promoted_active_products(db_session):
    _, product = await _make_store(db_session, is_promoted=True)
    collection = await _make_global_collection(db_session)

    member = await curation.add_to_global_collection(
        db_session, collection.slug, product.id
    )

    assert member.order_index == 0
    members = await curation.list_global_collection_products(db_session, collection)
    assert [m.product_id for m in members] == [product.id]


@pytest.mark.asyncio
@pytest.mark.unit
@pytest.mark.parametrize(
    "overrides",
    [
        {"is_promoted": False},
        {"is_promoted": True, "status": ProductStatus.INACTIVE},
        {"is_promoted": True, "status": ProductStatus.DRAFT},
    ],
)
async def test_global_collection_rejects_ineligible_products(db_session, overrides):
    _, product = await _make_store(db_session, **overrides)
    collection = await _make_global_collection(db_session)

    with pytest.raises(NotEligible):
        await curation.add_to_global_collection(db_session, collection.slug, product.id)

    members = await curation.list_global_collection_products(db_session, collection)
    assert members == []


@pytest.mark.asyncio
@pytest.mark.unit
async def test_global_collection_lookups(db_session):
    _, product = await _make_store(db_session, is_promoted=True)
    inactive = await _make_global_collection(db_session, is_active=False)
    collection = await _make_global_collection(db_session)

    with pytest.raises(NotFound):
        await curation.get_global_collection(db_session, "no-such-slug")
    with pytest.raises(NotFound):
        await curation.get_global_collection(db_session, inactive.slug)
    with pytest.raises(NotFound):
        await curation.add_to_global_collection(
            db_session, collection.slug, uuid.uuid4()
        )

    await curation.add_to_global_collection(db_session, collection.slug, product.id)
    assert await curation.remove_from_global_collection(
        db_session, collection.slug, product.id
    )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_list_global_collections_newest_first(db_session):
    now = datetime.now(timezone.utc)
    older = await _make_global_collection(
        db_session, created_at=now - timedelta(days=2)
    )
    newer = await _make_global_collection(db_session, created_at=now)
    await _make_global_collection(
        db_session, is_active=False, created_at=now - timedelta(days=1)
    )

    collections = await curation.list_global_collections(db_session)

    assert [c.id for c in collections] == [newer.id, older.id]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_global_collection(db_session):
    collection = await curation.create_global_collection(
        db_session,
        slug="summer-picks",
        name="Summer picks",
        cover_image_url="https://cdn.example.com/summer.jpg",
    )

    assert collection.is_active is True
    assert collection.description is None
    fetched = await curation.get_global_collection(db_session, "summer-picks")
    assert fetched.id == collection.id
    assert fetched.cover_image_url == "https://cdn.example.com/summer.jpg"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_create_global_collection_slug_taken(db_session):
    existing = await _make_global_collection(db_session, is_active=False)

    with pytest.raises(SlugTaken):
        await curation.create_global_collection(
            db_session, slug=existing.slug, name="Again"
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_update_global_collection_reaches_inactive(db_session):
    collection = await _make_global_collection(
        db_session, is_active=False, description="Old"
    )

    updated = await curation.update_global_collection(
        db_session,
        collection.slug,
        {"is_active": True, "description": None, "name": None},
    )

    assert updated.is_active is True
    assert updated.description is None
    assert updated.name == "Featured"
    assert (await curation.get_global_collection(db_session, collection.slug)).id == (
        collection.id
    )
    with pytest.raises(NotFound):
        await curation.update_global_collection(db_session, "missing", {"name": "X"})


@pytest.mark.asyncio
@pytest.mark.unit
async def test_delete_global_collection_drops_members(db_session):
    _, product = await _make_store(db_session, is_promoted=True)
    collection = await _make_global_collection(db_session)
    await curation.add_to_global_collection(db_session, collection.slug, product.id)

    await curation.delete_global_collection(db_session, collection.slug)

    with pytest.raises(NotFound):
        await curation.get_global_collection(db_session, collection.slug)
    members = await db_session.execute(
        select(func.count())
        .select_from(GlobalCollectionProduct)
        .where(GlobalCollectionProduct.global_collection_id == collection.id)
    )
    assert members.scalar_one() == 0
    with pytest.raises(NotFound):
        await curation.delete_global_collection(db_session, collection.slug)


# ---------------------------------------------------------------------------
# Product media
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_media_is_listed_in_upload_order_with_default_cover(db_session):
    store, product = await _make_store(db_session)

    uploaded = [
        await curation.add_product_media(
            db_session,
            store.seller_id,
            product.id,
            media_url=f"https://cdn.example.com/{i}.jpg",
        )
        for i in range(3)
    ]

    media, cover = await curation.list_product_media(db_session, product.id)
    assert [m.id for m in media] == [m.id for m in uploaded]
    assert cover.id == uploaded[0].id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_new_cover_upload_takes_the_flag(db_session):
    store, product = await _make_store(db_session)
    first = await curation.add_product_media(
        db_session,
        store.seller_id,
        product.id,
        media_url="https://cdn/1.jpg",
        is_cover=True,
    )
    second = await curation.add_product_media(
        db_session,
        store.seller_id,
        product.id,
        media_url="https://cdn/2.mp4",
        media_type=MediaType.VIDEO,
        mime_type="video/mp4",
        is_cover=True,
    )

    media, cover = await curation.list_product_media(db_session, product.id)

    assert cover.id == second.id
    flags = {m.id: m.is_cover for m in media}
    assert flags == {first.id: False, second.id: True}


@pytest.mark.asyncio
@pytest.mark.unit
async def test_set_cover_moves_flag(db_session):
    store, product = await _make_store(db_session)
    first = await curation.add_product_media(
        db_session,
        store.seller_id,
        product.id,
        media_url="https://cdn/1.jpg",
        is_cover=True,
    )
    second = await curation.add_product_media(
        db_session, store.seller_id, product.id, media_url="https://cdn/2.jpg"
    )

    await curation.set_cover(db_session, store.seller_id, product.id, second.id)
    # Setting the current cover again is a no-op.
    await curation.set_cover(db_session, store.seller_id, product.id, second.id)

    media, cover = await curation.list_product_media(db_session, product.id)
    assert cover.id == second.id
    assert [m.is_cover for m in media] == [False, True]
    assert first.id == media[0].id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_media_of_another_product_is_not_found(db_session):
    store, product = await _make_store(db_session)
    other = ProductFactory.create(store_id=store.id)
    db_session.add(other)
    await db_session.commit()
    media = await curation.add_product_media(
        db_session, store.seller_id, other.id, media_url="https://cdn/x.jpg"
    )

    with pytest.raises(NotFound):
        await curation.set_cover(db_session, store.seller_id, product.id, media.id)
    with pytest.raises(NotFound):
        await curation.remove_product_media(
            db_session, store.seller_id, product.id, media.id
        )


@pytest.mark.asyncio
@pytest.mark.unit
async def test_remove_media_then_cover_falls_back(db_session):
    store, product = await _make_store(db_session)
    first = await curation.add_product_media(
        db_session, store.seller_id, product.id, media_url="https://cdn/1.jpg"
    )
    second = await curation.add_product_media(
        db_session, store.seller_id, product.id, media_url="https://cdn/2.jpg"
    )

    await curation.remove_product_media(
        db_session, store.seller_id, product.id, first.id
    )

    media, cover = await curation.list_product_media(db_session, product.id)
    assert [m.id for m in media] == [second.id]
    assert cover.id == second.id


@pytest.mark.asyncio
@pytest.mark.unit
async def test_media_requires_ownership(db_session):
    _, product = await _make_store(db_session)
    intruder, _ = await _make_store(db_session)

    with pytest.raises(Forbidden):
        await curation.add_product_media(
            db_session, intruder.seller_id, product.id, media_url="https://cdn/x.jpg"
        )
    with pytest.raises(NotFound):
        await curation.list_product_media(db_session, uuid.uuid4())
