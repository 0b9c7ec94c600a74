"""Integration tests for collections, global collections and product media."""

import asyncio
import uuid

import pytest
from services.store_service.app.main import app
from tests.conftest import make_admin_user, make_user, override_auth
from tests.factories import GlobalCollectionFactory, ProductFactory, StoreFactory

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _seed_store(db_session, products=2, **product_overrides):
    store = StoreFactory.create()
    items = [
        ProductFactory.create(store_id=store.id, title=f"Item {i}", **product_overrides)
        for i in range(products)
    ]
    db_session.add(store)
    db_session.add_all(items)
    await db_session.commit()
    return store, items


# ---------------------------------------------------------------------------
# Store collections
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_and_list_collections(store_client, db_session):
    store, _ = await _seed_store(db_session)

    with override_auth(app, make_user(store.seller_id)):
        first = await store_client.post("/collections", json={"name": "Summer"})
        second = await store_client.post("/collections", json={"name": "Winter"})
        listing = await store_client.get(f"/stores/{store.id}/collections")

    assert first.status_code == 201, first.text
    assert first.json()["order_index"] == 0
    assert second.json()["order_index"] == 1
    assert [c["name"] for c in listing.json()] == ["Summer", "Winter"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_collection_requires_store(store_client):
    with override_auth(app, make_user("no-store-user")):
        response = await store_client.post("/collections", json={"name": "X"})

    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_collection_membership_flow(store_client, db_session):
    store, (first, second) = await _seed_store(db_session)

    with override_auth(app, make_user(store.seller_id)):
        collection = (
            await store_client.post("/collections", json={"name": "Picks"})
        ).json()
        url = f"/collections/{collection['id']}/products"
        add_first = await store_client.post(url, json={"product_id": str(first.id)})
        add_second = await store_client.post(url, json={"product_id": str(second.id)})
        duplicate = await store_client.post(url, json={"product_id": str(first.id)})
        removed = await store_client.delete(f"{url}/{first.id}")

    with override_auth(app, None):
        members = await store_client.get(url)

    assert add_first.json() == {"success": True, "order_index": 0}
    assert add_second.json()["order_index"] == 1
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "duplicate_member"
    assert removed.json() == {"success": True}
    assert [m["product_id"] for m in members.json()] == [str(second.id)]
    assert members.json()[0]["order_index"] == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_foreign_seller_cannot_modify_collection(store_client, db_session):
    owner, (product,) = await _seed_store(db_session, products=1)
    intruder, _ = await _seed_store(db_session, products=0)

    with override_auth(app, make_user(owner.seller_id)):
        collection = (
            await store_client.post("/collections", json={"name": "Mine"})
        ).json()
    url = f"/collections/{collection['id']}/products"

    with override_auth(app, make_user(intruder.seller_id)):
        add = await store_client.post(url, json={"product_id": str(product.id)})
        remove = await store_client.delete(f"{url}/{product.id}")
        listing = await store_client.get(f"/stores/{owner.id}/collections")

    assert add.status_code == 403
    assert remove.status_code == 403
    assert listing.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_collection(store_client):
    response = await store_client.get(f"/collections/{uuid.uuid4()}/products")

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_concurrent_adds_get_distinct_indices(store_client, db_session):
    store, products = await _seed_store(db_session, products=5)

    with override_auth(app, make_user(store.seller_id)):
        collection = (
            await store_client.post("/collections", json={"name": "Rush"})
        ).json()
        url = f"/collections/{collection['id']}/products"
        responses = await asyncio.gather(
            *[
                store_client.post(url, json={"product_id": str(p.id)})
                for p in products
            ]
        )

    assert all(r.status_code == 201 for r in responses)
    assert sorted(r.json()["order_index"] for r in responses) == list(range(5))


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_collection_and_product_memberships(store_client, db_session):
    store, (product, _) = await _seed_store(db_session)
    intruder, _ = await _seed_store(db_session, products=0)

    with override_auth(app, make_user(store.seller_id)):
        ids = [
            (await store_client.post("/collections", json={"name": name})).json()["id"]
            for name in ("A", "B", "C")
        ]
        for collection_id in ids[:2]:
            await store_client.post(
                f"/collections/{collection_id}/products",
                json={"product_id": str(product.id)},
            )
        before = await store_client.get(f"/products/{product.id}/collections")
        deleted = await store_client.delete(f"/collections/{ids[1]}")
        after = await store_client.get(f"/products/{product.id}/collections")
        listing = await store_client.get(f"/stores/{store.id}/collections")
        missing = await store_client.delete(f"/collections/{uuid.uuid4()}")

    with override_auth(app, make_user(intruder.seller_id)):
        foreign_delete = await store_client.delete(f"/collections/{ids[0]}")
        foreign_lookup = await store_client.get(f"/products/{product.id}/collections")

    assert before.status_code == 200, before.text
    assert set(before.json()["collection_ids"]) == set(ids[:2])
    assert deleted.json() == {"success": True}
    assert after.json()["collection_ids"] == [ids[0]]
    assert [(c["id"], c["order_index"]) for c in listing.json()] == [
        (ids[0], 0),
        (ids[2], 2),
    ]
    assert missing.status_code == 404
    assert foreign_delete.status_code == 403
    assert foreign_lookup.status_code == 403


# ---------------------------------------------------------------------------
# Global collections
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_global_collection_curation(store_client, db_session):
    _, (promoted,) = await _seed_store(db_session, products=1, is_promoted=True)
    _, (plain,) = await _seed_store(db_session, products=1)
    collection = GlobalCollectionFactory.create(slug="featured")
    db_session.add(collection)
    await db_session.commit()

    with override_auth(app, make_admin_user()):
        added = await store_client.post(
            "/global-collections/featured/products",
            json={"product_id": str(promoted.id)},
        )
        rejected = await store_client.post(
            "/global-collections/featured/products",
            json={"product_id": str(plain.id)},
        )
        missing = await store_client.post(
            "/global-collections/unknown/products",
            json={"product_id": str(promoted.id)},
        )

    with override_auth(app, None):
        public = await store_client.get("/global-collections/featured")

    assert added.status_code == 201, added.text
    assert added.json()["order_index"] == 0
    assert rejected.status_code == 400
    assert rejected.json()["error"] == "not_eligible"
    assert missing.status_code == 404
    data = public.json()
    assert data["slug"] == "featured"
    assert [p["product_id"] for p in data["products"]] == [str(promoted.id)]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_global_collection_writes_require_admin(store_client, db_session):
    collection = GlobalCollectionFactory.create(slug="staff-picks")
    db_session.add(collection)
    await db_session.commit()

    response = await store_client.post(
        "/global-collections/staff-picks/products",
        json={"product_id": str(uuid.uuid4())},
    )
    removal = await store_client.delete(
        f"/global-collections/staff-picks/products/{uuid.uuid4()}"
    )

    assert response.status_code == 403
    assert removal.status_code == 403


@pytest.mark.asyncio
@pytest.mark.integration
async def test_global_collection_admin_crud(store_client):
    with override_auth(app, make_admin_user()):
        created = await store_client.post(
            "/global-collections",
            json={
                "slug": "gift-ideas",
                "name": "Gift ideas",
                "cover_image_url": "https://cdn.example.com/gifts.jpg",
            },
        )
        duplicate = await store_client.post(
            "/global-collections", json={"slug": "gift-ideas", "name": "Again"}
        )
        bad_slug = await store_client.post(
            "/global-collections", json={"slug": "Gift Ideas", "name": "Bad"}
        )
        hidden = await store_client.patch(
            "/global-collections/gift-ideas", json={"is_active": False}
        )

    with override_auth(app, None):
        listing_hidden = await store_client.get("/global-collections")
        detail_hidden = await store_client.get("/global-collections/gift-ideas")

    with override_auth(app, make_admin_user()):
        shown = await store_client.patch(
            "/global-collections/gift-ideas",
            json={"is_active": True, "description": "For the holidays"},
        )
        listing = await store_client.get("/global-collections")
        deleted = await store_client.delete("/global-collections/gift-ideas")
        deleted_again = await store_client.delete("/global-collections/gift-ideas")
        patch_missing = await store_client.patch(
            "/global-collections/gift-ideas", json={"name": "Gone"}
        )

    assert created.status_code == 201, created.text
    assert created.json()["is_active"] is True
    assert created.json()["cover_image_url"] == "https://cdn.example.com/gifts.jpg"
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "slug_taken"
    assert bad_slug.status_code == 422
    assert hidden.json()["is_active"] is False
    assert listing_hidden.json() == {"collections": []}
    assert detail_hidden.status_code == 404
    assert shown.json()["description"] == "For the holidays"
    assert [c["slug"] for c in listing.json()["collections"]] == ["gift-ideas"]
    assert deleted.json() == {"success": True}
    assert deleted_again.status_code == 404
    assert patch_missing.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_global_collection_admin_routes_reject_sellers(store_client):
    create = await store_client.post(
        "/global-collections", json={"slug": "mine", "name": "Mine"}
    )
    patch = await store_client.patch("/global-collections/mine", json={"name": "X"})
    delete = await store_client.delete("/global-collections/mine")

    assert create.status_code == patch.status_code == delete.status_code == 403


# ---------------------------------------------------------------------------
# Product media
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_media_gallery_flow(store_client, db_session):
    store, (product, _) = await _seed_store(db_session)
    url = f"/products/{product.id}/media"

    with override_auth(app, make_user(store.seller_id)):
        first = await store_client.post(url, json={"media_url": "https://cdn/1.jpg"})
        second = await store_client.post(
            url,
            json={
                "media_url": "https://cdn/2.mp4",
                "media_type": "video",
                "mime_type": "video/mp4",
            },
        )
        default_cover = (await store_client.get(url)).json()["cover_id"]
        cover = await store_client.put(f"{url}/{second.json()['id']}/cover")
        deleted = await store_client.delete(f"{url}/{first.json()['id']}")
        deleted_again = await store_client.delete(f"{url}/{first.json()['id']}")

    with override_auth(app, None):
        gallery = await store_client.get(url)

    assert first.status_code == 201, first.text
    assert (first.json()["order_index"], second.json()["order_index"]) == (0, 1)
    assert default_cover == first.json()["id"]
    assert cover.status_code == 200
    assert deleted.status_code == 200
    assert deleted_again.status_code == 404
    data = gallery.json()
    assert [m["id"] for m in data["media"]] == [second.json()["id"]]
    assert data["cover_id"] == second.json()["id"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_media_requires_product_owner(store_client, db_session):
    _, (product, _) = await _seed_store(db_session)
    intruder, _ = await _seed_store(db_session, products=0)

    with override_auth(app, make_user(intruder.seller_id)):
        response = await store_client.post(
            f"/products/{product.id}/media", json={"media_url": "https://cdn/x.jpg"}
        )
        missing = await store_client.post(
            f"/products/{uuid.uuid4()}/media", json={"media_url": "https://cdn/x.jpg"}
        )

    assert response.status_code == 403
    assert missing.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health(store_client):
    response = await store_client.get("/health")

    assert response.json() == {"status": "ok", "service": "store"}
