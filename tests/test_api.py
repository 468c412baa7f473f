from __future__ import annotations

from ctrlattr.api import Client, ParsedAttribute, ParserMode, TargetType


class FakeResolver:
    def resolve(self, record: ParsedAttribute) -> list[str]:
        return [f"{record.target_type.name.lower()}-{record.target_id}"]


def test_public_client_lists_attributes() -> None:
    client = Client()
    entries = client.list_attributes()
    assert entries
    assert any(entry.name == "Brightness" for entry in entries)
    assert client.get_attribute("BRIGHTNESS") is not None
    assert client.load_warnings == ()


def test_public_client_query_and_assign() -> None:
    client = Client()
    record = client.query("[gpu:1]/GPUCoreTemp")
    assert record.target_type is TargetType.GPU
    assert not record.has_value

    record = client.assign(":0/Brightness=75")
    assert record.value is not None
    assert record.value.data == 75


def test_public_client_parse_many_and_resolve() -> None:
    client = Client(resolver=FakeResolver(), default_display=":1")
    records = client.parse_many(["[gpu:0]/GPUCoreTemp", "[fan:2]/GPUCoreTemp"], mode=ParserMode.QUERY)
    resolved = [client.resolve(record).targets for record in records]
    assert resolved == [("gpu-0",), ("cooler-2",)]
    assert all(record.display == ":1" for record in records)
