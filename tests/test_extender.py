import pytest

from nebulaop.extender import (
    ANN_LAST_APPLIED_CONFIG_KEY,
    get_containers,
    get_replicas,
    get_spec,
    get_status,
    get_template_spec,
    is_updating,
    object_equal,
    pod_template_equal,
    set_container_image,
    set_last_applied_config_annotation,
    set_spec_field,
    set_template_annotations,
    set_update_partition,
)

KEY = "nebula-graph.io/last-applied-configuration"


def test_get_spec():
    assert get_spec({}) is None
    assert get_spec({"spec": {"a": "b"}}) == {"a": "b"}


def test_get_spec_not_a_map():
    assert get_spec({"spec": "text"}) is None


def test_get_spec_returns_copy():
    obj = {"spec": {"a": {"b": "c"}}}
    spec = get_spec(obj)
    spec["a"]["b"] = "changed"
    assert obj["spec"]["a"]["b"] == "c"


def test_get_template_spec():
    assert get_template_spec({}) is None
    obj = {"spec": {"template": {"spec": {"a": "b"}}}}
    assert get_template_spec(obj) == {"a": "b"}


def test_get_status():
    assert get_status({}) is None
    assert get_status({"status": {"a": "b"}}) == {"a": "b"}


def test_get_replicas():
    assert get_replicas({}) is None
    assert get_replicas({"spec": {"replicas": 1}}) == 1


def test_get_containers():
    assert get_containers({}) is None
    obj = {"spec": {"template": {"spec": {"containers": [{"c1": "abc", "c2": "efg"}]}}}}
    assert get_containers(obj) == [{"c1": "abc", "c2": "efg"}]


def test_set_spec_field():
    obj = {}
    set_spec_field(obj, None)
    assert obj == {"spec": None}

    set_spec_field(obj, {"a": "1", "b": "2"})
    assert obj == {"spec": {"a": "1", "b": "2"}}


def test_set_spec_field_through_non_map_raises():
    obj = {"spec": "text"}
    with pytest.raises(ValueError):
        set_spec_field(obj, 1, "replicas")


def test_set_template_annotations():
    obj = {}
    set_template_annotations(obj, None)
    assert obj == {"spec": {"template": {"metadata": {"annotations": {}}}}}

    value = {"a": "1", "b": "2"}
    set_template_annotations(obj, value)
    annotations = obj["spec"]["template"]["metadata"]["annotations"]
    assert annotations["a"] == value["a"]
    assert annotations == value


def test_set_template_annotations_keeps_existing():
    obj = {"spec": {"template": {"metadata": {"annotations": {"x": "0"}}}}}
    set_template_annotations(obj, {"a": "1"})
    assert obj["spec"]["template"]["metadata"]["annotations"] == {"x": "0", "a": "1"}


def test_set_template_annotations_non_string_raises():
    obj = {"spec": {"template": {"metadata": {"annotations": {"x": 1}}}}}
    with pytest.raises(ValueError):
        set_template_annotations(obj, {"a": "1"})


def test_set_last_applied_config_annotation():
    obj = {}
    set_last_applied_config_annotation(obj)
    assert obj == {"metadata": {"annotations": {KEY: "null"}}}

    obj = {"a": "1", "b": "2"}
    set_last_applied_config_annotation(obj)
    set_last_applied_config_annotation(obj)
    assert obj == {
        "a": "1",
        "b": "2",
        "metadata": {"annotations": {KEY: "null"}},
    }


def test_set_last_applied_config_annotation_round_trip():
    obj = {"spec": {"replicas": 1, "template": {"a": "1"}, "updateStrategy": {"s": "x"}}}
    set_last_applied_config_annotation(obj)
    assert ANN_LAST_APPLIED_CONFIG_KEY == KEY
    new_obj = {
        "spec": {"replicas": 1, "template": {"a": "1"}, "updateStrategy": {"s": "x"}}
    }
    assert object_equal(new_obj, obj) is True


def test_set_update_partition():
    obj = {}
    set_update_partition(obj, 1, 30, False)
    assert obj == {
        "spec": {"updateStrategy": {"rollingUpdate": {"partition": 1}, "type": "RollingUpdate"}}
    }

    obj = {"spec": {"replicas": 2}}
    set_update_partition(obj, 1, 30, False)
    assert obj == {
        "spec": {
            "replicas": 2,
            "updateStrategy": {
                "rollingUpdate": {"partition": 1},
                "type": "RollingUpdate",
            },
        }
    }


def test_set_update_partition_advanced():
    obj = {}
    set_update_partition(obj, 1, 30, True)
    rolling = obj["spec"]["updateStrategy"]["rollingUpdate"]
    assert rolling["podUpdatePolicy"] == "InPlaceIfPossible"
    assert rolling["inPlaceUpdateStrategy"] == {"gracePeriodSeconds": 30}
    assert rolling["partition"] == 1


def test_set_container_image():
    obj = {}
    set_container_image(obj, "test", "nebula:v2.0")
    assert obj == {}

    obj = {
        "spec": {
            "template": {
                "spec": {"containers": [{"name": "test", "image": "nebula:v2.1"}]}
            }
        }
    }
    set_container_image(obj, "test", "nebula:v2.0")
    assert obj == {
        "spec": {
            "template": {
                "spec": {"containers": [{"name": "test", "image": "nebula:v2.0"}]}
            }
        }
    }


def test_set_container_image_no_match_unchanged():
    obj = {"spec": {"template": {"spec": {"containers": [{"name": "other", "image": "img"}]}}}}
    set_container_image(obj, "test", "nebula:v2.0")
    assert obj["spec"]["template"]["spec"]["containers"] == [{"name": "other", "image": "img"}]


def test_pod_template_equal():
    new_obj = {}
    old_obj = {}
    assert pod_template_equal(new_obj, old_obj) is False

    new_obj = {"spec": {"template": {"spec": {"a": "1", "b": "2"}}}}
    assert pod_template_equal(new_obj, old_obj) is False

    old_obj = {
        "metadata": {
            "annotations": {KEY: '{"template":{"spec":{"a":"1","b":"2"}}}'}
        }
    }
    assert pod_template_equal(new_obj, old_obj) is True

    old_obj["metadata"]["annotations"][KEY] = '{"template":{"spec":{"a":"1","b":"2","c":"3"}}}'
    assert pod_template_equal(new_obj, old_obj) is False


def test_pod_template_equal_bad_json():
    new_obj = {"spec": {"template": {"spec": {"a": "1"}}}}
    old_obj = {"metadata": {"annotations": {KEY: "{not json"}}}
    assert pod_template_equal(new_obj, old_obj) is False


def test_object_equal():
    new_obj = {}
    old_obj = {}
    assert object_equal(new_obj, old_obj) is False

    new_obj = {"metadata": {"annotations": {"test.io": "abc"}}}
    old_obj = {
        "metadata": {
            "annotations": {
                KEY: '{"replicas":1,"template":{"a":"1","b":"2"},"updateStrategy":{"strategy":"abc"}}',
                "test.io": "abc",
                "instance": "efg",
            }
        }
    }
    assert object_equal(new_obj, old_obj) is False

    new_obj["metadata"]["annotations"]["instance"] = "efg"
    new_obj["spec"] = {
        "replicas": 1,
        "template": {"a": "1", "b": "2"},
        "updateStrategy": {"strategy": "abc"},
    }
    assert object_equal(new_obj, old_obj) is True

    new_obj["spec"]["replicas"] = 3
    assert object_equal(new_obj, old_obj) is False


def test_is_updating():
    obj = {}
    assert is_updating(obj) is False

    obj = {
        "metadata": {"generation": 1},
        "spec": {"replicas": 1},
        "status": {"currentRevision": "796dfdbf86", "updateRevision": "1f6dfdbf213"},
    }
    assert is_updating(obj) is False

    obj["status"] = {"updateRevision": "1f6dfdbf213", "observedGeneration": 1}
    assert is_updating(obj) is False

    obj["status"] = {"currentRevision": "796dfdbf86", "observedGeneration": 1}
    assert is_updating(obj) is False

    obj["status"] = {
        "currentRevision": "796dfdbf86",
        "updateRevision": "796dfdbf86",
        "observedGeneration": 1,
    }
    assert is_updating(obj) is False

    obj["metadata"]["generation"] = 2
    obj["status"]["replicas"] = 1
    assert is_updating(obj) is True


def test_is_updating_revisions_differ():
    obj = {
        "metadata": {"generation": 1},
        "spec": {"replicas": 1},
        "status": {
            "currentRevision": "796dfdbf86",
            "updateRevision": "1f6dfdbf213",
            "observedGeneration": 1,
        },
    }
    assert is_updating(obj) is True