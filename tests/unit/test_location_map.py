from jobsync.domain.entities.location_map import LocationMap, code_variants


def test_code_variants_order_without_duplicates():
    assert code_variants(" Ab C ") == [" Ab C ", " ab c ", "Ab C", "ab c", "AbC", "abc"]
    assert code_variants("X") == ["X", "x"]


def test_resolve_is_case_and_whitespace_insensitive():
    location_map = LocationMap()
    location_map.register("OL_LOC_0020", "loc-20")

    assert location_map.resolve("OL_LOC_0020") == "loc-20"
    assert location_map.resolve("ol_loc_0020 ") == "loc-20"
    assert location_map.resolve("OL_LOC _0020") == "loc-20"
    assert location_map.resolve("OL_LOC_0099") is None
    assert location_map.resolve("") is None
    assert location_map.resolve(None) is None


def test_first_registration_wins_on_collision():
    location_map = LocationMap()
    location_map.register("ABC", "first")
    location_map.register("abc", "second")

    assert location_map.resolve("ABC") == "first"
    assert location_map.resolve("abc") == "first"
    assert len(location_map) == 2


def test_empty_map_is_falsy():
    location_map = LocationMap()
    assert not location_map
    location_map.register("", "id")
    location_map.register("code", "")
    assert not location_map
