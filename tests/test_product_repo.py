from datetime import datetime, timezone

from storefront.repositories.product_repo import ProductRepository

repo = ProductRepository()


def test_listing_skips_drafts_and_trashed_products(session, make_product):
    make_product(name="Classic Tee", slug="classic-tee")
    make_product(name="Draft Tee", slug="draft-tee", publish_status="Draft")
    make_product(name="Old Tee", slug="old-tee", trashed_at=datetime.now(timezone.utc))

    assert [p.slug for p in repo.list_products(session)] == ["classic-tee"]
    assert [p.slug for p in repo.list_all_published(session)] == ["classic-tee"]
    assert sorted(p.slug for p in repo.list_products(session, only_published=False)) == [
        "classic-tee",
        "draft-tee",
    ]


def test_name_lookup_ignores_case(session, make_product):
    tee = make_product(name="Classic Tee")

    assert repo.get_by_name_ci(session, "  CLASSIC tee ").id == tee.id
    assert repo.get_by_name_ci(session, "Classic") is None
