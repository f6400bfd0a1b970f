"""
Pytest configuration and fixtures for native-catalog tests.
"""

import sys
from pathlib import Path
import pytest

# Add src directory to Python path to allow importing native_catalog
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from native_catalog.models import Native


# Configure anyio to only use asyncio (not trio)
@pytest.fixture
def anyio_backend():
    return "asyncio"


def make_native(**overrides) -> Native:
    """Build a native from wire-format keys with sensible defaults."""
    data = {
        "hash": "0x1",
        "name": "GET_PLAYER_PED",
        "namespace": "PLAYER",
        "apiset": "client",
        "return_type": "Entity",
        "params": [{"name": "playerIndex", "type": "int"}],
    }
    data.update(overrides)
    return Native.model_validate(data)


@pytest.fixture
def native_factory():
    return make_native


@pytest.fixture
def player_ped() -> Native:
    return make_native()


@pytest.fixture
def sample_natives() -> list[Native]:
    """A small catalog spanning namespaces and access tiers."""
    return [
        make_native(),
        make_native(
            hash="0x7F5BEA7E",
            name="SET_VEHICLE_DOORS_LOCKED",
            namespace="VEHICLE",
            apiset="client",
            return_type="void",
            params=[{"name": "vehicle", "type": "Vehicle"}, {"name": "doorLockStatus", "type": "int"}],
        ),
        make_native(
            hash="0xA4F8",
            name="GET_ENTITY_COORDS",
            namespace="ENTITY",
            apiset="shared",
            return_type="Vector3",
            params=[{"name": "entity", "type": "Entity"}, {"name": "alive", "type": "BOOL"}],
        ),
        make_native(
            hash="0x2E",
            name="GET_PLAYER_NAME",
            name_sp="GET_PLAYER_NAME_SP",
            namespace="PLAYER",
            apiset="server",
            return_type="char*",
            params=[{"name": "player", "type": "Player"}],
        ),
        make_native(
            hash="0x9C",
            name="",
            namespace="CFX",
            apiset="shared",
            return_type="void",
            params=[],
        ),
    ]
