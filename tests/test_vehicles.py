"""
Tests for the vehicle list
"""
import pytest

import vehicles as vehicles_module
from vehicles import VehicleList, normalize_vehicle


class TestVehicleList:

    @pytest.mark.unit
    def test_add_normalizes(self, storage):
        vehicles = VehicleList(storage)
        assert vehicles.add("  mh12ab1234 ") is True
        assert vehicles.list() == ["MH12AB1234"]

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["MH12AB1234", "mh12ab1234", " Mh12Ab1234"])
    def test_duplicates_ignore_case(self, storage, name):
        vehicles = VehicleList(storage)
        vehicles.add("MH12AB1234")
        assert vehicles.add(name) is False
        assert len(vehicles.list()) == 1

    @pytest.mark.unit
    def test_blank_rejected(self, storage):
        vehicles = VehicleList(storage)
        assert vehicles.add("   ") is False
        assert vehicles.list() == []

    @pytest.mark.unit
    def test_remove_ignores_case(self, storage):
        vehicles = VehicleList(storage)
        vehicles.add("KA01XY0001")
        vehicles.add("KA01XY0002")
        assert vehicles.remove("ka01xy0001") is True
        assert vehicles.list() == ["KA01XY0002"]
        assert vehicles.remove("ka01xy0001") is False

    @pytest.mark.unit
    def test_failed_remove_keeps_list(self, storage, monkeypatch):
        vehicles = VehicleList(storage)
        vehicles.add("KA01XY0001")

        def boom(*args, **kwargs):
            raise OSError("read-only file system")

        monkeypatch.setattr(vehicles_module, "save_list", boom)
        with pytest.raises(OSError):
            vehicles.remove("KA01XY0001")
        assert vehicles.list() == ["KA01XY0001"]

    @pytest.mark.unit
    def test_persisted(self, storage):
        VehicleList(storage).add("GJ05AA1111")
        reloaded = VehicleList(storage)
        assert reloaded.list() == ["GJ05AA1111"]
        assert "gj05aa1111" in reloaded

    @pytest.mark.unit
    def test_corrupt_list_loads_empty(self, storage):
        storage.set_item("vehicleList", "{oops")
        assert VehicleList(storage).list() == []

    @pytest.mark.unit
    def test_stored_duplicates_collapse(self, storage):
        storage.set_item("vehicleList", '["ab1", "AB1", "cd2"]')
        assert VehicleList(storage).list() == ["AB1", "CD2"]


@pytest.mark.unit
def test_normalize_vehicle():
    assert normalize_vehicle(" tn 09 ") == "TN 09"
    assert normalize_vehicle(None) == ""  # type: ignore[arg-type]
