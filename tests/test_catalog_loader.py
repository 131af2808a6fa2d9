import json

from rose_assistant.catalog_loader import Catalog, flatten_knowledge_base, get_catalog, load_catalog


catalog = get_catalog()


def test_bundled_catalog_loads():
    assert len(catalog.categories) == 8
    assert len(catalog.products) > 20
    assert len(catalog.knowledge) > 5


def test_local_record_mapping():
    kit = catalog.get_product("fabric_conditioner_kit")
    assert kit.price == 1100
    assert kit.yield_ == "20 litres"
    assert kit.cost_per_liter == 55
    assert kit.category_key == "diy_kits"
    assert kit.category_name == "DIY Kits"
    assert kit.popularity_score == 95
    assert "softener" in kit.search_terms
    assert kit.source == "local"


def test_incomplete_records_kept_but_not_complete():
    acid = catalog.get_product("citric_acid")
    assert acid is not None
    assert acid.price is None
    assert acid not in catalog.complete_products()


def test_related_products():
    related = catalog.related_products("fabric_conditioner_kit")
    assert [p.id for p in related] == ["liquid_detergent_ultra_kit", "fabric_conditioner_5l"]
    assert catalog.related_products("delux_broom") == []
    assert catalog.related_products("missing") == []


def test_category_products():
    assert len(catalog.category_products("brooms")) == 4
    assert len(catalog.category_products("diy_kits", limit=3)) == 3
    raw = [p.id for p in catalog.category_products("chemical_raw_materials")]
    assert "citric_acid" not in raw
    assert catalog.category_products("unknown") == []


def test_popular_products():
    popular = catalog.popular_products()
    assert len(popular) == 5
    assert popular[0].id == "fabric_conditioner_kit"
    assert all(p.popularity_score > 70 for p in popular)


def test_missing_file_yields_empty_catalog(tmp_path):
    empty = load_catalog(str(tmp_path / "nope.json"))
    assert empty.products == []
    assert empty.knowledge == []


def test_malformed_file_yields_empty_catalog(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_catalog(str(path)).products == []
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_catalog(str(path)).products == []


def test_from_dict_accepts_price_field(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({
        "categories": {"containers": {"products": [{"id": "jar", "name": "Jar", "price": "₹40"}]}},
    }), encoding="utf-8")
    loaded = load_catalog(str(path))
    jar = loaded.get_product("jar")
    assert jar.price == 40
    assert jar.category_name == "containers"


def test_flatten_knowledge_base_order():
    entries = flatten_knowledge_base({
        "extra": [{"question": "Z", "answer": "z"}],
        "franchise": [{"question": "F", "answer": "f"}],
        "main_menu": {"greeting": {"question": "Hi", "answer": "hello"}},
        "product_kits": [{"question": "K", "answer": "k"}, "bad"],
    })
    assert [e.section for e in entries] == ["main_menu", "product_kits", "franchise", "extra"]


def test_empty_catalog():
    empty = Catalog()
    assert empty.popular_products() == []
    assert empty.get_product("x") is None
