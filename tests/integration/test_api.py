"""
Integration tests for the editor HTTP API.
"""

import pytest
from fastapi.testclient import TestClient

from jmx_transcoder.core.parser import parse_jmx
from jmx_transcoder.main import app
from jmx_transcoder.routers import jmx_editor


@pytest.fixture
def client():
    return TestClient(app)


def upload(client, text, filename="ping.jmx"):
    return client.post("/api/jmx/parse", files={"file": (filename, text, "application/xml")})


def element_named(payload, name):
    def search(node):
        if node["name"] == name:
            return node
        for child in node["children"]:
            found = search(child)
            if found:
                return found
        return None

    return search(payload["test_plan"]["test_plan"])


@pytest.fixture
def loaded(client, ping_plan):
    response = upload(client, ping_plan)
    assert response.status_code == 200
    return response.json()


class TestRoot:
    def test_root(self, client):
        assert client.get("/").json() == {"msg": "JMX transcoder running."}


class TestComponentLibrary:
    def test_lists_every_kind(self, client):
        body = client.get("/api/jmx/component-library").json()
        assert body["success"] is True
        types = [entry["type"] for entry in body["components"]]
        assert "HTTPSamplerProxy" in types
        assert "ResultCollector" in types
        assert "samplers" not in body["categories"]
        assert "sampler" in body["categories"]

    def test_by_category(self, client):
        body = client.get("/api/jmx/component-library/timer").json()
        assert {entry["category"] for entry in body["components"]} == {"timer"}
        assert "ConstantTimer" in [entry["type"] for entry in body["components"]]

    def test_unknown_category(self, client):
        response = client.get("/api/jmx/component-library/gadgets")
        assert response.status_code == 404
        assert "gadgets" in response.json()["error"]


class TestParse:
    def test_returns_tree(self, loaded):
        assert loaded["success"] is True
        assert loaded["filename"] == "ping.jmx"
        assert loaded["thread_groups"] == ["Users"]
        assert loaded["diagnostics"] == []
        assert element_named(loaded, "Ping")["domain"] == "api.example.com"

    def test_rejects_other_extensions(self, client, ping_plan):
        response = upload(client, ping_plan, filename="plan.xml")
        assert response.status_code == 400
        assert response.json() == {"error": "File must be a .jmx file"}

    def test_rejects_malformed_xml(self, client):
        response = upload(client, "<jmeterTestPlan><hashTree></jmeterTestPlan>", filename="broken.jmx")
        assert response.status_code == 400
        assert "error" in response.json()

    def test_rejects_oversized_upload(self, client, ping_plan, monkeypatch):
        monkeypatch.setattr(jmx_editor.settings, "max_upload_bytes", 100)
        response = upload(client, ping_plan)
        assert response.status_code == 413

    def test_reports_dropped_elements(self, client, wrap):
        text = wrap('<com.acme.Custom testclass="com.acme.Custom" testname="Mystery"/><hashTree/>')
        body = upload(client, text, filename="custom.jmx").json()
        assert [d["code"] for d in body["diagnostics"]] == ["unknown-element"]
        assert body["diagnostics"][0]["name"] == "Mystery"


class TestSample:
    def test_load_sample(self, client):
        body = client.post("/api/jmx/load-sample").json()
        assert body["success"] is True
        assert body["thread_groups"] == ["Sample Thread Group"]
        assert body["filename"] is None

    def test_sample_downloads(self, client):
        plan_id = client.post("/api/jmx/load-sample").json()["plan_id"]
        response = client.get(f"/api/jmx/plans/{plan_id}/jmx")
        assert response.status_code == 200
        assert 'filename="Sample_Test_Plan.jmx"' in response.headers["content-disposition"]
        assert parse_jmx(response.text).lossless


class TestPlans:
    def test_download_non_ascii_filename(self, client, ping_plan):
        plan_id = upload(client, ping_plan, filename="тест.jmx").json()["plan_id"]
        response = client.get(f"/api/jmx/plans/{plan_id}/jmx")
        assert response.status_code == 200
        disposition = response.headers["content-disposition"]
        assert 'filename="____.jmx"' in disposition
        assert "filename*=UTF-8''%D1%82%D0%B5%D1%81%D1%82.jmx" in disposition

        selected = client.post(f"/api/jmx/plans/{plan_id}/select", json={"thread_groups": ["Users"]})
        assert selected.status_code == 200

    def test_get_plan(self, client, loaded):
        body = client.get(f"/api/jmx/plans/{loaded['plan_id']}").json()
        assert body["test_plan"] == loaded["test_plan"]

    def test_unknown_plan(self, client):
        for path in ["", "/jmx", "/analysis"]:
            response = client.get(f"/api/jmx/plans/no-such-plan{path}")
            assert response.status_code == 404

    def test_download_round_trips(self, client, loaded):
        response = client.get(f"/api/jmx/plans/{loaded['plan_id']}/jmx")
        assert response.headers["content-type"].startswith("application/xml")
        assert 'filename="ping.jmx"' in response.headers["content-disposition"]
        group = parse_jmx(response.text).document.test_plan.children[0]
        assert (group.num_threads, group.ramp_time, group.loops) == (3, 5, 2)

    def test_analysis(self, client, loaded):
        body = client.get(f"/api/jmx/plans/{loaded['plan_id']}/analysis").json()
        assert body["findings"] == []
        assert "GET https://api.example.com/ping" in body["summary"]


class TestEditing:
    def test_add_element(self, client, loaded):
        group = element_named(loaded, "Users")
        response = client.post(
            f"/api/jmx/plans/{loaded['plan_id']}/elements",
            json={"parent_id": group["id"], "type": "ConstantTimer", "fields": {"name": "Think", "delay": 250}},
        )
        assert response.status_code == 200
        assert response.json()["element"]["delay"] == 250

        text = client.get(f"/api/jmx/plans/{loaded['plan_id']}/jmx").text
        assert '<stringProp name="ConstantTimer.delay">250</stringProp>' in text

    def test_add_at_index(self, client, loaded):
        group = element_named(loaded, "Users")
        client.post(
            f"/api/jmx/plans/{loaded['plan_id']}/elements",
            json={"parent_id": group["id"], "type": "HeaderManager", "index": 0},
        )
        plan = client.get(f"/api/jmx/plans/{loaded['plan_id']}").json()
        assert [c["type"] for c in element_named(plan, "Users")["children"]] == ["HeaderManager", "HTTPSamplerProxy"]

    def test_add_unknown_kind(self, client, loaded):
        response = client.post(
            f"/api/jmx/plans/{loaded['plan_id']}/elements",
            json={"parent_id": loaded["test_plan"]["test_plan"]["id"], "type": "com.acme.Custom"},
        )
        assert response.status_code == 400

    def test_add_under_unknown_parent(self, client, loaded):
        response = client.post(
            f"/api/jmx/plans/{loaded['plan_id']}/elements",
            json={"parent_id": "missing", "type": "ConstantTimer"},
        )
        assert response.status_code == 404

    def test_add_with_invalid_fields(self, client, loaded):
        response = client.post(
            f"/api/jmx/plans/{loaded['plan_id']}/elements",
            json={"parent_id": loaded["test_plan"]["test_plan"]["id"], "type": "ConstantTimer", "fields": {"colour": "red"}},
        )
        assert response.status_code == 422

    @pytest.mark.parametrize("fields", [{"type": "X"}, {"id": "el-1"}, {"children": [{"type": "ThreadGroup"}]}])
    def test_add_with_tree_managed_fields(self, client, loaded, fields):
        response = client.post(
            f"/api/jmx/plans/{loaded['plan_id']}/elements",
            json={"parent_id": loaded["test_plan"]["test_plan"]["id"], "type": "ConstantTimer", "fields": fields},
        )
        assert response.status_code == 422
        assert client.get(f"/api/jmx/plans/{loaded['plan_id']}/jmx").status_code == 200

    def test_add_second_test_plan_refused(self, client, loaded):
        response = client.post(
            f"/api/jmx/plans/{loaded['plan_id']}/elements",
            json={"parent_id": loaded["test_plan"]["test_plan"]["id"], "type": "TestPlan"},
        )
        assert response.status_code == 422
        plan = client.get(f"/api/jmx/plans/{loaded['plan_id']}").json()
        assert [c["type"] for c in plan["test_plan"]["test_plan"]["children"]] == ["ThreadGroup"]

    def test_update_element(self, client, loaded):
        sampler = element_named(loaded, "Ping")
        response = client.patch(
            f"/api/jmx/plans/{loaded['plan_id']}/elements/{sampler['id']}",
            json={"method": "POST", "path": "/pong"},
        )
        assert response.status_code == 200
        assert (response.json()["element"]["method"], response.json()["element"]["path"]) == ("POST", "/pong")

    def test_update_locked_field(self, client, loaded):
        sampler = element_named(loaded, "Ping")
        response = client.patch(
            f"/api/jmx/plans/{loaded['plan_id']}/elements/{sampler['id']}",
            json={"children": []},
        )
        assert response.status_code == 422

    def test_update_unknown_element(self, client, loaded):
        response = client.patch(f"/api/jmx/plans/{loaded['plan_id']}/elements/missing", json={"name": "x"})
        assert response.status_code == 404

    def test_delete_element(self, client, loaded):
        assertion = element_named(loaded, "Is 200")
        response = client.delete(f"/api/jmx/plans/{loaded['plan_id']}/elements/{assertion['id']}")
        assert response.json() == {"success": True, "removed": assertion["id"]}
        plan = client.get(f"/api/jmx/plans/{loaded['plan_id']}").json()
        assert element_named(plan, "Is 200") is None

    def test_delete_test_plan_refused(self, client, loaded):
        root_id = loaded["test_plan"]["test_plan"]["id"]
        response = client.delete(f"/api/jmx/plans/{loaded['plan_id']}/elements/{root_id}")
        assert response.status_code == 400

    def test_delete_unknown(self, client, loaded):
        response = client.delete(f"/api/jmx/plans/{loaded['plan_id']}/elements/missing")
        assert response.status_code == 404

    def test_toggle(self, client, loaded):
        group = element_named(loaded, "Users")
        response = client.post(f"/api/jmx/plans/{loaded['plan_id']}/elements/{group['id']}/toggle")
        assert response.json() == {"success": True, "id": group["id"], "enabled": False}
        text = client.get(f"/api/jmx/plans/{loaded['plan_id']}/jmx").text
        assert 'testname="Users" enabled="false"' in text

    def test_toggle_unknown(self, client, loaded):
        response = client.post(f"/api/jmx/plans/{loaded['plan_id']}/elements/missing/toggle")
        assert response.status_code == 404


class TestSelect:
    @pytest.fixture
    def plan_id(self, client, wrap):
        groups = "".join(
            f'<ThreadGroup guiclass="ThreadGroupGui" testclass="ThreadGroup" testname="{name}" enabled="true"/><hashTree/>'
            for name in ["Browse", "Checkout"]
        )
        return upload(client, wrap(groups), filename="two.jmx").json()["plan_id"]

    def test_only_selected_enabled(self, client, plan_id):
        response = client.post(f"/api/jmx/plans/{plan_id}/select", json={"thread_groups": ["Checkout"]})
        assert response.status_code == 200
        groups = parse_jmx(response.text).document.thread_groups()
        assert {g.name: g.enabled for g in groups} == {"Browse": False, "Checkout": True}

    def test_stored_plan_unchanged(self, client, plan_id):
        client.post(f"/api/jmx/plans/{plan_id}/select", json={"thread_groups": ["Checkout"]})
        text = client.get(f"/api/jmx/plans/{plan_id}/jmx").text
        assert 'enabled="false"' not in text

    def test_unknown_group(self, client, plan_id):
        response = client.post(f"/api/jmx/plans/{plan_id}/select", json={"thread_groups": ["Nope"]})
        assert response.status_code == 400
        assert "Nope" in response.json()["error"]
