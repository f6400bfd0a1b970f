"""
Tests for signature synthesis.

Tests cover:
- Display name derivation (capitalized words, hex ids, alternate names)
- Each dialect's layout for plain and out-parameter natives
- Parameter order preservation across dialects
- Fallbacks for unknown types and empty parameter lists
- Compact row signatures used by the catalog list
"""

from __future__ import annotations

import pytest

from native_catalog.models import Dialect, DisplaySettings, NamingConvention
from native_catalog.signatures import (
    SignatureSynthesizer,
    display_name,
    is_hex_identifier,
    partition_parameters,
    synthesize,
    to_pascal_case,
)

RAW = DisplaySettings()
LUA = DisplaySettings(dialect=Dialect.LUA)
TS = DisplaySettings(dialect=Dialect.TYPESCRIPT)
CS = DisplaySettings(dialect=Dialect.CSHARP)
ALL_SETTINGS = [RAW, LUA, TS, CS]


@pytest.fixture
def ground_z(native_factory):
    """Native with a bool return and one out-parameter in the middle."""
    return native_factory(
        hash="0xC906A7DAB05C8D2B",
        name="GET_GROUND_Z_FOR_3D_COORD",
        namespace="MISC",
        return_type="BOOL",
        params=[
            {"name": "x", "type": "float"},
            {"name": "y", "type": "float"},
            {"name": "z", "type": "float"},
            {"name": "groundZ", "type": "float*"},
            {"name": "ignoreWater", "type": "BOOL"},
        ],
    )


@pytest.fixture
def void_single_out(native_factory):
    return native_factory(
        hash="0x1B",
        name="GET_PED_BONE_POSITION_OUT",
        return_type="void",
        params=[{"name": "outPos", "type": "Vector3*"}],
    )


# ============================================================================
# Display Names
# ============================================================================


class TestDisplayName:
    """Test the name derivation step."""

    def test_to_pascal_case(self):
        assert to_pascal_case("GET_PLAYER_PED") == "GetPlayerPed"
        assert to_pascal_case("_GET_X") == "GetX"
        assert to_pascal_case("network_is_host") == "NetworkIsHost"

    def test_is_hex_identifier(self):
        assert is_hex_identifier("0x1")
        assert is_hex_identifier("0xDEADbeef")
        assert not is_hex_identifier("GET_PLAYER_PED")
        assert not is_hex_identifier("0x")

    def test_raw_dialect_raw_naming_keeps_canonical_name(self, player_ped):
        assert display_name(player_ped, RAW) == "GET_PLAYER_PED"

    def test_symbolic_dialects_use_capitalized_words(self, player_ped):
        for settings in (LUA, TS, CS):
            assert display_name(player_ped, settings) == "GetPlayerPed"

    def test_alternate_naming_capitalizes_in_raw_dialect(self, player_ped):
        settings = DisplaySettings(naming_convention=NamingConvention.ALTERNATE)
        assert display_name(player_ped, settings) == "GetPlayerPed"

    def test_alternate_name_preferred_when_requested(self, native_factory):
        native = native_factory(name="GET_PLAYER_NAME", name_sp="GET_PLAYER_NAME_SP")
        settings = DisplaySettings(naming_convention=NamingConvention.ALTERNATE, dialect=Dialect.LUA)
        assert display_name(native, settings) == "GetPlayerNameSp"
        assert display_name(native, LUA) == "GetPlayerName"

    def test_alternate_naming_without_alternate_falls_back(self, player_ped):
        settings = DisplaySettings(naming_convention=NamingConvention.ALTERNATE, dialect=Dialect.LUA)
        assert display_name(player_ped, settings) == "GetPlayerPed"

    def test_hash_only_native_becomes_legal_identifier(self, native_factory):
        native = native_factory(hash="0x9cAF", name="")
        assert display_name(native, RAW) == "0x9cAF"
        for settings in (LUA, TS, CS):
            assert display_name(native, settings) == "N_0x9CAF"


# ============================================================================
# Dialect Layouts
# ============================================================================


class TestRawDialect:
    """Test the canonical declaration."""

    def test_example_signature(self, player_ped):
        signature = synthesize(player_ped, RAW)
        assert "Entity GET_PLAYER_PED (int playerIndex)" in signature.definition_text
        assert signature.highlight == "c"

    def test_hex_id_comment_above_signature(self, player_ped):
        lines = synthesize(player_ped, RAW).definition_text.split("\n")
        assert lines == ["// 0x1", "Entity GET_PLAYER_PED (int playerIndex)"]

    def test_non_hex_id_has_no_comment(self, native_factory):
        native = native_factory(hash="GET_THING", name="GET_THING", params=[])
        assert synthesize(native, RAW).definition_text == "Entity GET_THING ()"

    def test_out_params_stay_pointers(self, ground_z):
        text = synthesize(ground_z, RAW).definition_text
        assert text.endswith(
            "BOOL GET_GROUND_Z_FOR_3D_COORD (float x, float y, float z, float* groundZ, BOOL ignoreWater)"
        )


class TestLuaDialect:
    """Test the value-returning script dialect."""

    def test_example_call(self, player_ped):
        signature = synthesize(player_ped, LUA)
        assert signature.highlight == "lua"
        assert signature.definition_text.startswith("-- GET_PLAYER_PED\n")
        assert "GetPlayerPed(playerIndex --[[ number ]])" in signature.definition_text

    def test_non_void_return_is_captured(self, player_ped):
        text = synthesize(player_ped, LUA).definition_text
        assert text.split("\n")[1] == "local retval --[[ entity ]] = GetPlayerPed(playerIndex --[[ number ]])"

    def test_void_without_outputs_is_bare_call(self, native_factory):
        native = native_factory(
            name="SET_VEHICLE_DOORS_LOCKED",
            return_type="void",
            params=[{"name": "vehicle", "type": "Vehicle"}, {"name": "doorLockStatus", "type": "int"}],
        )
        text = synthesize(native, LUA).definition_text
        assert text.split("\n")[1] == (
            "SetVehicleDoorsLocked(vehicle --[[ vehicle ]], doorLockStatus --[[ number ]])"
        )

    def test_outputs_follow_return_value(self, ground_z):
        text = synthesize(ground_z, LUA).definition_text
        assert text.split("\n")[1] == (
            "local retval --[[ boolean ]], groundZ --[[ number ]] = GetGroundZFor3dCoord("
            "x --[[ number ]], y --[[ number ]], z --[[ number ]], ignoreWater --[[ boolean ]])"
        )

    def test_void_with_output_returns_output_only(self, void_single_out):
        text = synthesize(void_single_out, LUA).definition_text
        assert text.split("\n")[1] == "local outPos --[[ vector3 ]] = GetPedBonePositionOut()"

    def test_string_pointer_is_an_input(self, native_factory):
        native = native_factory(
            name="PLAY_SOUND",
            return_type="void",
            params=[{"name": "audioName", "type": "char*"}],
        )
        text = synthesize(native, LUA).definition_text
        assert text.split("\n")[1] == "PlaySound(audioName --[[ string ]])"


class TestTypeScriptDialect:
    """Test the typed destructuring dialect."""

    def test_inputs_are_annotated(self, player_ped):
        signature = synthesize(player_ped, TS)
        assert signature.highlight == "typescript"
        assert signature.definition_text.split("\n")[1] == (
            "const retval: number = GetPlayerPed(playerIndex: number);"
        )

    def test_single_output_is_not_bracketed(self, void_single_out):
        text = synthesize(void_single_out, TS).definition_text
        assert text.split("\n")[1] == "const outPos: Vector3 = GetPedBonePositionOut();"
        assert "[" not in text

    def test_output_with_return_value_destructures(self, ground_z):
        text = synthesize(ground_z, TS).definition_text
        assert text.split("\n")[1] == (
            "const [retval, groundZ]: [boolean, number] = "
            "GetGroundZFor3dCoord(x: number, y: number, z: number, ignoreWater: boolean);"
        )

    def test_void_without_outputs_is_statement(self, native_factory):
        native = native_factory(name="CLEAR_AREA", return_type="void", params=[])
        assert synthesize(native, TS).definition_text.split("\n")[1] == "ClearArea();"


class TestCSharpDialect:
    """Test the managed by-reference dialect."""

    def test_declaration(self, player_ped):
        signature = synthesize(player_ped, CS)
        assert signature.highlight == "csharp"
        assert signature.definition_text.split("\n")[1] == "Entity GetPlayerPed(int playerIndex);"

    def test_out_params_are_ref_in_place(self, ground_z):
        text = synthesize(ground_z, CS).definition_text
        assert text.split("\n")[1] == (
            "bool GetGroundZFor3dCoord(float x, float y, float z, ref float groundZ, bool ignoreWater);"
        )

    def test_string_pointer_is_not_ref(self, native_factory):
        native = native_factory(name="GET_LABEL_TEXT", return_type="char*", params=[{"name": "label", "type": "char*"}])
        assert synthesize(native, CS).definition_text.split("\n")[1] == "string GetLabelText(string label);"


# ============================================================================
# Invariants
# ============================================================================


class TestSynthesisInvariants:
    """Properties that hold for every dialect."""

    @pytest.mark.parametrize("settings", ALL_SETTINGS)
    def test_unknown_types_and_no_params_still_render(self, native_factory, settings):
        native = native_factory(hash="MYSTERY", name="MYSTERY", return_type="Frobnicator", params=[])
        text = synthesize(native, settings).definition_text
        assert text.strip()

    @pytest.mark.parametrize("settings", ALL_SETTINGS)
    def test_unknown_param_type_uses_untyped_marker(self, native_factory, settings):
        native = native_factory(params=[{"name": "thing", "type": "Frobnicator"}])
        text = synthesize(native, settings).definition_text
        assert "thing" in text

    @pytest.mark.parametrize("settings", ALL_SETTINGS)
    def test_parameter_order_preserved(self, native_factory, settings):
        native = native_factory(
            name="MIXED",
            return_type="int",
            params=[
                {"name": "alpha", "type": "int"},
                {"name": "bravo", "type": "Vector3*"},
                {"name": "charlie", "type": "char*"},
                {"name": "delta", "type": "float*"},
                {"name": "echo", "type": "BOOL"},
            ],
        )
        text = synthesize(native, settings).definition_text
        inputs, outputs = partition_parameters(native.parameters)
        for group in (inputs, outputs):
            positions = [text.index(param.name) for _, param in group]
            assert positions == sorted(positions)
        if settings.dialect in (Dialect.RAW, Dialect.CSHARP):
            positions = [text.index(name) for name in ("alpha", "bravo", "charlie", "delta", "echo")]
            assert positions == sorted(positions)

    def test_unnamed_params_get_positional_names(self, native_factory):
        native = native_factory(params=[{"name": "", "type": "int"}, {"name": "", "type": "float"}])
        assert "(int p0, float p1)" in synthesize(native, RAW).definition_text

    def test_synthesis_does_not_touch_descriptor(self, ground_z):
        before = ground_z.model_dump()
        for settings in ALL_SETTINGS:
            synthesize(ground_z, settings)
        assert ground_z.model_dump() == before

    def test_partition_keeps_positions(self, ground_z):
        inputs, outputs = partition_parameters(ground_z.parameters)
        assert [index for index, _ in inputs] == [0, 1, 2, 4]
        assert [index for index, _ in outputs] == [3]


class TestRowSignature:
    """Test compact signatures for catalog rows."""

    def test_raw_row_keeps_everything(self, ground_z):
        row = SignatureSynthesizer().row_signature(ground_z, RAW)
        assert row.return_type == "BOOL"
        assert row.name == "GET_GROUND_Z_FOR_3D_COORD"
        assert [name for _, name in row.parameters] == ["x", "y", "z", "groundZ", "ignoreWater"]

    @pytest.mark.parametrize("settings", [LUA, TS])
    def test_unrepresentable_params_are_dropped(self, ground_z, settings):
        row = SignatureSynthesizer().row_signature(ground_z, settings)
        assert [name for _, name in row.parameters] == ["x", "y", "z", "ignoreWater"]
        assert len(ground_z.parameters) == 5

    def test_csharp_row_marks_ref(self, ground_z):
        row = SignatureSynthesizer().row_signature(ground_z, CS)
        assert ("ref float", "groundZ") in row.parameters
        assert row.return_type == "bool"
