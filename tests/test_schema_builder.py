from typing import List, Optional, Sequence

from routedoc.metadata.annotations import api, api_property
from routedoc.metadata.types import type_name
from routedoc.models.schema_builder import ModelSchemaBuilder, notes_mention_required, property_name

from sample_api.models import Car, GarageController, NotDocumented, Widget


class Tyre:
    pass


@api("Broken")
class Broken:
    @api_property("Bad")
    def getThing(self) -> "NoSuchType":  # noqa: F821
        return None


def _other_widget():
    @api("Other widget")
    class Widget:
        @api_property("Weight")
        def getWeight(self) -> float:
            return 0.0

    return Widget


def test_car_scenario():
    models = ModelSchemaBuilder().scan([Car])
    car = models["Car"]

    assert car.name == "Car"
    assert car.description == "A car in the fleet"

    top = car.properties["topSpeed"]
    assert top.id == "topSpeed"
    assert top.name == "topSpeed"
    assert top.type == "int"
    assert top.required is True
    assert top.description == "Top speed in km/h"


def test_generic_list_keeps_element_casing():
    car = ModelSchemaBuilder().scan([Car])["Car"]
    assert car.properties["items"].type == "list<Widget>"


def test_allowable_values_and_optional_property():
    car = ModelSchemaBuilder().scan([Car])["Car"]

    colour = car.properties["colour"]
    assert colour.allowable_values.value_type == "LIST"
    assert colour.allowable_values.values == ["red", "green", "blue"]
    assert car.properties["topSpeed"].allowable_values is None

    plate = car.properties["plate"]
    assert plate.type == "str"
    # case-sensitive match
    assert plate.required is False


def test_unannotated_methods_and_classes_are_skipped():
    models = ModelSchemaBuilder().scan([Car, NotDocumented, Widget])
    assert set(models) == {"Car", "Widget"}
    assert "mileage" not in models["Car"].properties


def test_resource_owner_with_path_is_still_buildable_when_passed_explicitly():
    # discovery filters controllers out; the builder itself only needs @api
    models = ModelSchemaBuilder().scan([GarageController])
    assert models["GarageController"].properties == {}


def test_simple_name_collision_last_wins_and_is_recorded():
    other = _other_widget()
    builder = ModelSchemaBuilder()
    models = builder.scan([Widget, other])

    assert models["Widget"].name == "Other widget"
    assert len(builder.conflicts) == 1
    model_id, replaced, replacing = builder.conflicts[0]
    assert model_id == "Widget"
    assert replaced.endswith("models.Widget")
    assert "_other_widget" in replacing


def test_unresolvable_model_is_skipped():
    models = ModelSchemaBuilder().scan([Broken, Widget])
    assert list(models) == ["Widget"]


def test_required_policy_is_pluggable():
    builder = ModelSchemaBuilder(is_required=lambda notes: notes.lower().startswith("required"))
    car = builder.scan([Car])["Car"]
    assert car.properties["plate"].required is True


def test_property_name_rules():
    assert property_name("getTopSpeed") == "topSpeed"
    assert property_name("get_top_speed") == "top_speed"
    assert property_name("Items") == "items"
    assert property_name("get") == ""


def test_required_heuristic():
    assert notes_mention_required("required, metric")
    assert notes_mention_required("not required")
    assert not notes_mention_required("Required")
    assert not notes_mention_required("")


def test_type_names():
    assert type_name(int) == "int"
    assert type_name(Tyre) == "tyre"
    assert type_name(List[Tyre]) == "list<Tyre>"
    assert type_name(list[Tyre]) == "list<Tyre>"
    assert type_name(Sequence[Tyre]) == "list<Tyre>"
    assert type_name(Optional[List[Tyre]]) == "list<Tyre>"
    assert type_name(List) == "list<object>"
    assert type_name(List["pkg.mod.Tyre"]) == "list<Tyre>"
    assert type_name(Optional[Tyre]) == "tyre"
    assert type_name(None) == "void"
    assert type_name(dict) == "dict"
