import pytest

from esindex_operator.controllers.schema.esindex import (
    Empty,
    EsIndex,
    EsIndexSpec,
    FromConfig,
    FromSecret,
    ResourceState,
)

from conftest import make_binding, make_esindex


def test_spec_parses_wire_form():
    spec = EsIndexSpec.model_validate(
        {
            "indexName": "logs",
            "bindOnly": True,
            "numberOfShards": 3,
            "numberOfReplicas": 2,
            "esURIComposed": {"configMapKeyRef": {"name": "es-config", "key": "uri"}},
        }
    )
    assert spec.index_name == "logs"
    assert spec.bind_only is True
    assert spec.number_of_shards == 3
    assert spec.number_of_replicas == 2
    assert spec.credential_source() == FromConfig(config_name="es-config", key="uri")
    assert spec.binding_reference is None


def test_spec_defaults():
    spec = EsIndexSpec.model_validate({"indexName": "logs"})
    assert spec.bind_only is False
    assert spec.number_of_shards == 1
    assert spec.number_of_replicas == 1
    assert isinstance(spec.credential_source(), Empty)


def test_secret_selector_becomes_from_secret():
    spec = EsIndexSpec.model_validate(
        {"indexName": "logs", "esURIComposed": {"secretKeyRef": {"name": "es-creds", "key": "uri"}}}
    )
    assert spec.credential_source() == FromSecret(secret_name="es-creds", key="uri")


def test_both_selectors_rejected():
    spec = EsIndexSpec.model_validate(
        {
            "indexName": "logs",
            "esURIComposed": {
                "secretKeyRef": {"name": "es-creds", "key": "uri"},
                "configMapKeyRef": {"name": "es-config", "key": "uri"},
            },
        }
    )
    with pytest.raises(ValueError):
        spec.credential_source()


@pytest.mark.parametrize("name, expected", [("  b1 ", "b1"), ("", None), ("   ", None)])
def test_binding_reference_is_trimmed(name, expected):
    spec = EsIndexSpec.model_validate({"indexName": "logs", "bindingFrom": {"name": name}})
    assert spec.binding_reference == expected


def test_status_generation_alias_round_trips():
    esindex = make_esindex(status={"state": "Online", "message": "", "generation": 4})
    assert esindex.status.observed_generation == 4
    assert esindex.status.model_dump(by_alias=True) == {"state": "Online", "message": "", "generation": 4}
    assert esindex.status.state == ResourceState.ONLINE.value


def test_being_deleted_follows_deletion_timestamp():
    assert make_esindex().being_deleted is False
    assert make_esindex(deletion_timestamp="2026-10-19T10:00:00Z").being_deleted is True


def test_unknown_fields_are_ignored():
    esindex = EsIndex.model_validate(
        {
            "metadata": {"name": "logs", "labels": {"app": "x"}, "managedFields": []},
            "spec": {"indexName": "logs", "somethingNew": 1},
        }
    )
    assert esindex.metadata.name == "logs"
    assert esindex.status.state == ""


def test_binding_owner_references_parse():
    binding = make_binding("b1", owner_references=[{"kind": "Service", "name": "svc1", "uid": "u1"}])
    owner = binding.metadata.owner_references[0]
    assert (owner.kind, owner.name, owner.uid, owner.api_version) == ("Service", "svc1", "u1", "")
    assert binding.spec.secret_name == ""
