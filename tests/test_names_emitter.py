from __future__ import annotations

import io

from attrgen.emitters.names import assign_codes, emit_enum, emit_names
from attrgen.models import CODE_BEARING, AttributeDef, Catalogue, Category, GeneratorConfig


def _attr(name: str, category: Category, spelling: str | None = None) -> AttributeDef:
    return AttributeDef(name=name, category=category, display_string=spelling or name.lower())


def _catalogue(*attrs: AttributeDef, config: GeneratorConfig | None = None) -> Catalogue:
    return Catalogue(
        catalogue_id="test/attrs",
        version=1,
        attributes=tuple(attrs),
        config=config or GeneratorConfig(),
    )


def _render(emit, catalogue: Catalogue) -> str:
    buf = io.StringIO()
    emit(catalogue, buf)
    return buf.getvalue()


def test_codes_follow_category_order_not_declaration_order() -> None:
    catalogue = _catalogue(
        _attr("Alignment", Category.INT),
        _attr("ByVal", Category.TYPE),
        _attr("NoReturn", Category.ENUM),
        _attr("Cold", Category.ENUM),
        _attr("Range", Category.CONSTANT_RANGE),
        _attr("Initializes", Category.CONSTANT_RANGE_LIST),
    )
    assignment = assign_codes(catalogue)
    assert assignment.codes == {
        "NoReturn": 1,
        "Cold": 2,
        "ByVal": 3,
        "Alignment": 4,
        "Range": 5,
        "Initializes": 6,
    }
    assert [r.category for r in assignment.ranges] == list(CODE_BEARING)


def test_codes_are_strictly_increasing(fixture_catalogue) -> None:
    assignment = assign_codes(fixture_catalogue)
    ordered = [assignment.codes[name] for r in assignment.ranges for name in r.names]
    assert ordered[0] == 1
    assert ordered == list(range(1, len(ordered) + 1))
    for r in assignment.ranges:
        if r.names:
            assert r.last == assignment.codes[r.names[-1]]


def test_string_categories_get_no_codes(fixture_catalogue) -> None:
    assignment = assign_codes(fixture_catalogue)
    assert "LessPreciseFPMAD" not in assignment.codes
    assert "DenormalFPMath" not in assignment.codes


def test_empty_category_brackets_an_empty_range() -> None:
    catalogue = _catalogue(_attr("NoReturn", Category.ENUM), _attr("Alignment", Category.INT))
    assignment = assign_codes(catalogue)

    type_range = assignment.range_for(Category.TYPE)
    assert type_range.first == 2
    assert type_range.last == 1
    assert type_range.empty
    assert 1 not in type_range
    assert 2 not in type_range

    int_range = assignment.range_for(Category.INT)
    assert int_range.first == 2
    assert 2 in int_range


def test_emit_enum_end_to_end_example() -> None:
    catalogue = _catalogue(
        _attr("NoReturn", Category.ENUM, "noreturn"),
        _attr("Alignment", Category.INT, "align"),
    )
    assert _render(emit_enum, catalogue) == (
        "#ifdef GET_ATTR_ENUM\n"
        "#undef GET_ATTR_ENUM\n"
        "FirstEnumAttr = 1,\n"
        "NoReturn = 1,\n"
        "LastEnumAttr = 1,\n"
        "FirstTypeAttr = 2,\n"
        "LastTypeAttr = 1,\n"
        "FirstIntAttr = 2,\n"
        "Alignment = 2,\n"
        "LastIntAttr = 2,\n"
        "FirstConstantRangeAttr = 3,\n"
        "LastConstantRangeAttr = 2,\n"
        "FirstConstantRangeListAttr = 3,\n"
        "LastConstantRangeListAttr = 2,\n"
        "#endif\n\n"
    )


def test_emit_names_groups_and_macros() -> None:
    catalogue = _catalogue(
        _attr("NoFree", Category.STR_BOOL, "no-free"),
        _attr("Alignment", Category.INT, "align"),
        _attr("NoReturn", Category.ENUM, "noreturn"),
        _attr("DenormalFPMath", Category.COMPLEX_STR, "denormal-fp-math"),
    )
    assert _render(emit_names, catalogue) == (
        "#ifdef GET_ATTR_NAMES\n"
        "#undef GET_ATTR_NAMES\n"
        "#ifndef ATTRIBUTE_ALL\n"
        "#define ATTRIBUTE_ALL(FIRST, SECOND)\n"
        "#endif\n\n"
        "#ifndef ATTRIBUTE_ENUM\n"
        "#define ATTRIBUTE_ENUM(FIRST, SECOND) ATTRIBUTE_ALL(FIRST, SECOND)\n"
        "#endif\n\n"
        "ATTRIBUTE_ENUM(NoReturn,noreturn)\n"
        "ATTRIBUTE_ENUM(Alignment,align)\n"
        "#undef ATTRIBUTE_ENUM\n\n"
        "#ifndef ATTRIBUTE_STRBOOL\n"
        "#define ATTRIBUTE_STRBOOL(FIRST, SECOND) ATTRIBUTE_ALL(FIRST, SECOND)\n"
        "#endif\n\n"
        "ATTRIBUTE_STRBOOL(NoFree,no-free)\n"
        "#undef ATTRIBUTE_STRBOOL\n\n"
        "#ifndef ATTRIBUTE_COMPLEXSTR\n"
        "#define ATTRIBUTE_COMPLEXSTR(FIRST, SECOND) ATTRIBUTE_ALL(FIRST, SECOND)\n"
        "#endif\n\n"
        "ATTRIBUTE_COMPLEXSTR(DenormalFPMath,denormal-fp-math)\n"
        "#undef ATTRIBUTE_COMPLEXSTR\n\n"
        "#undef ATTRIBUTE_ALL\n"
        "#endif\n\n"
    )


def test_name_table_matches_enum_order(fixture_catalogue) -> None:
    names = _render(emit_names, fixture_catalogue)
    enum_entries = [
        line.split("(", 1)[1].split(",", 1)[0]
        for line in names.splitlines()
        if line.startswith("ATTRIBUTE_ENUM(")
    ]
    assignment = assign_codes(fixture_catalogue)
    assert enum_entries == sorted(assignment.codes, key=assignment.codes.__getitem__)


def test_custom_toggles_are_used() -> None:
    config = GeneratorConfig(names_toggle="WANT_NAMES", enum_toggle="WANT_ENUM")
    catalogue = _catalogue(_attr("NoReturn", Category.ENUM), config=config)
    names = _render(emit_names, catalogue)
    enum = _render(emit_enum, catalogue)
    assert names.startswith("#ifdef WANT_NAMES\n#undef WANT_NAMES\n")
    assert enum.startswith("#ifdef WANT_ENUM\n#undef WANT_ENUM\n")


def test_emit_names_is_byte_identical_across_runs(fixture_catalogue) -> None:
    assert _render(emit_names, fixture_catalogue) == _render(emit_names, fixture_catalogue)
