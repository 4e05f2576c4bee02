"""API tests for PI-QBO and PI-Job mappings."""

from ecofire.models import PIQBOMapping


class TestPIQBOMappings:
    def test_create_reports_names_and_live_targets(self, api):
        qbo = api.create_qbo(name="Revenue", target=10)
        pi = api.create_pi(name="Leads", target=50)

        mapping = api.map_pi_to_qbo(pi["id"], qbo["id"], 10)

        assert mapping["piName"] == "Leads"
        assert mapping["qboName"] == "Revenue"
        assert mapping["piTarget"] == 50
        assert mapping["qboTarget"] == 10
        assert mapping["qboImpact"] == 10

    def test_targets_follow_the_referenced_records(self, api, db_session):
        qbo = api.create_qbo(target=10)
        pi = api.create_pi(target=50)
        mapping = api.map_pi_to_qbo(pi["id"], qbo["id"], 10)

        api.put(f"/pis/{pi['id']}", json={"targetValue": 80})
        api.put(f"/qbos/{qbo['id']}", json={"targetValue": 20})

        fetched = api.get(f"/pi-qbo-mappings/{mapping['id']}")["data"]
        assert fetched["piTarget"] == 80
        assert fetched["qboTarget"] == 20

        # The stored snapshot catches up on the next write
        api.put(f"/pi-qbo-mappings/{mapping['id']}", json={"qboImpact": 12})
        stored = db_session.get(PIQBOMapping, mapping["id"])
        assert (stored.pi_target, stored.qbo_target, stored.qbo_impact) == (80, 20, 12)

    def test_client_supplied_targets_are_ignored(self, api):
        qbo = api.create_qbo(target=10)
        pi = api.create_pi(target=50)

        body = {"piId": pi["id"], "qboId": qbo["id"], "qboImpact": 1, "piTarget": 999, "qboTarget": 999}
        mapping = api.post("/pi-qbo-mappings", json=body)["data"]

        assert (mapping["piTarget"], mapping["qboTarget"]) == (50, 10)

    def test_duplicate_pair_conflicts(self, api):
        qbo = api.create_qbo()
        pi = api.create_pi()
        api.map_pi_to_qbo(pi["id"], qbo["id"], 10)

        body = api.post(
            "/pi-qbo-mappings", json={"piId": pi["id"], "qboId": qbo["id"], "qboImpact": 3}, expected=409
        )
        assert body["error"] == "A mapping between this PI and QBO already exists"

    def test_unknown_references(self, api):
        qbo = api.create_qbo()
        pi = api.create_pi()

        missing_pi = {"piId": "nope", "qboId": qbo["id"], "qboImpact": 1}
        missing_qbo = {"piId": pi["id"], "qboId": "nope", "qboImpact": 1}
        assert api.post("/pi-qbo-mappings", json=missing_pi, expected=404)["error"] == "PI not found"
        assert api.post("/pi-qbo-mappings", json=missing_qbo, expected=404)["error"] == "QBO not found"

    def test_filters(self, api):
        revenue = api.create_qbo(name="Revenue")
        margin = api.create_qbo(name="Margin")
        leads = api.create_pi(name="Leads")
        demos = api.create_pi(name="Demos")
        api.map_pi_to_qbo(leads["id"], revenue["id"], 1)
        api.map_pi_to_qbo(leads["id"], margin["id"], 2)
        api.map_pi_to_qbo(demos["id"], revenue["id"], 3)

        assert api.get("/pi-qbo-mappings")["count"] == 3
        by_pi = api.get("/pi-qbo-mappings", params={"piId": leads["id"]})["data"]
        assert sorted(m["qboImpact"] for m in by_pi) == [1, 2]
        by_qbo = api.get("/pi-qbo-mappings", params={"qboId": revenue["id"]})["data"]
        assert sorted(m["qboImpact"] for m in by_qbo) == [1, 3]

    def test_delete(self, api):
        mapping = api.map_pi_to_qbo(api.create_pi()["id"], api.create_qbo()["id"], 1)

        assert api.delete(f"/pi-qbo-mappings/{mapping['id']}")["message"] == "Mapping deleted successfully"
        assert api.get(f"/pi-qbo-mappings/{mapping['id']}", expected=404)["error"] == "Mapping not found"

    def test_deleting_a_qbo_removes_its_mappings(self, api):
        qbo = api.create_qbo()
        api.map_pi_to_qbo(api.create_pi()["id"], qbo["id"], 1)

        api.delete(f"/qbos/{qbo['id']}")

        assert api.get("/pi-qbo-mappings")["count"] == 0


class TestPIJobMappings:
    def test_create(self, api):
        pi = api.create_pi(name="Leads", target=50)
        job = api.create_job(title="Call customers")

        mapping = api.map_job_to_pi(job["id"], pi["id"], 25)

        assert mapping["jobName"] == "Call customers"
        assert mapping["piName"] == "Leads"
        assert mapping["piTarget"] == 50
        assert mapping["piImpactValue"] == 25

    def test_impact_defaults_to_zero(self, api):
        pi = api.create_pi()
        job = api.create_job()
        mapping = api.post("/pi-job-mappings", json={"jobId": job["id"], "piId": pi["id"]})["data"]
        assert mapping["piImpactValue"] == 0

    def test_unknown_or_deleted_job(self, api):
        pi = api.create_pi()
        job = api.create_job()
        api.delete(f"/jobs/{job['id']}")

        body = api.post(
            "/pi-job-mappings", json={"jobId": job["id"], "piId": pi["id"]}, expected=404
        )
        assert body["error"] == "Job not found"

    def test_filters(self, api):
        pi = api.create_pi()
        first = api.create_job(title="First")
        second = api.create_job(title="Second")
        api.map_job_to_pi(first["id"], pi["id"], 1)
        api.map_job_to_pi(second["id"], pi["id"], 2)

        by_job = api.get("/pi-job-mappings", params={"jobId": second["id"]})["data"]
        assert [m["piImpactValue"] for m in by_job] == [2]
        assert api.get("/pi-job-mappings", params={"piId": pi["id"]})["count"] == 2

    def test_update_and_delete(self, api):
        mapping = api.map_job_to_pi(api.create_job()["id"], api.create_pi()["id"], 1)

        updated = api.put(f"/pi-job-mappings/{mapping['id']}", json={"notes": "Q4 push"})["data"]
        assert updated["notes"] == "Q4 push"
        assert updated["piImpactValue"] == 1

        api.delete(f"/pi-job-mappings/{mapping['id']}")
        api.get(f"/pi-job-mappings/{mapping['id']}", expected=404)

    def test_notes_can_be_cleared(self, api):
        mapping = api.map_job_to_pi(api.create_job()["id"], api.create_pi()["id"], 1)
        api.put(f"/pi-job-mappings/{mapping['id']}", json={"notes": "Q4 push"})

        updated = api.put(f"/pi-job-mappings/{mapping['id']}", json={"notes": None})["data"]

        assert updated["notes"] is None
        assert updated["piImpactValue"] == 1

    def test_null_impact_is_rejected(self, api):
        mapping = api.map_pi_to_qbo(api.create_pi()["id"], api.create_qbo()["id"], 4)

        body = api.put(f"/pi-qbo-mappings/{mapping['id']}", json={"qboImpact": None}, expected=400)

        assert body["error"] == "qboImpact cannot be null"


class TestQBOJobs:
    def build(self, api):
        revenue = api.create_qbo(name="Revenue", target=10)
        leads = api.create_pi(name="Leads", target=50)
        demos = api.create_pi(name="Demos", target=0)
        api.map_pi_to_qbo(leads["id"], revenue["id"], 10)
        api.map_pi_to_qbo(demos["id"], revenue["id"], 4)
        return revenue, leads, demos

    def test_jobs_reached_through_any_pi(self, api):
        revenue, leads, demos = self.build(api)
        calls = api.create_job(title="Call customers")
        demo = api.create_job(title="Run demo")
        api.create_job(title="Unmapped")
        api.map_job_to_pi(calls["id"], leads["id"], 25)
        api.map_job_to_pi(calls["id"], demos["id"], 1)
        api.map_job_to_pi(demo["id"], demos["id"], 2)

        body = api.get("/qbo-job-mappings", params={"qboId": revenue["id"]})

        assert body["count"] == 2
        assert [j["title"] for j in body["data"]] == ["Call customers", "Run demo"]
        assert "impactPaths" not in body["data"][0]

    def test_done_and_deleted_jobs_are_left_out(self, api):
        revenue, leads, _ = self.build(api)
        done = api.create_job(title="Done job", is_done=True)
        deleted = api.create_job(title="Deleted job")
        api.map_job_to_pi(done["id"], leads["id"], 1)
        api.map_job_to_pi(deleted["id"], leads["id"], 1)
        api.delete(f"/jobs/{deleted['id']}")

        assert api.get("/qbo-job-mappings", params={"qboId": revenue["id"]})["data"] == []

    def test_details(self, api):
        revenue, leads, demos = self.build(api)
        calls = api.create_job(title="Call customers")
        api.map_job_to_pi(calls["id"], leads["id"], 25)
        api.map_job_to_pi(calls["id"], demos["id"], 3)

        body = api.get(
            "/qbo-job-mappings", params={"qboId": revenue["id"], "includeDetails": "true"}
        )

        [job] = body["data"]
        paths = {p["piName"]: p for p in job["impactPaths"]}
        assert paths["Leads"] == {
            "piId": leads["id"],
            "piName": "Leads",
            "piImpactValue": 25,
            "piTarget": 50,
            "qboImpact": 10,
            "jobContribution": 5,
        }
        # A zero PI target divides by 1
        assert paths["Demos"]["jobContribution"] == 12
        assert job["totalQBOContribution"] == 17

    def test_qbo_id_is_required(self, api):
        body = api.get("/qbo-job-mappings", expected=400)
        assert body == {"success": False, "error": "QBO ID is required as a query parameter"}

    def test_unmapped_qbo(self, api):
        qbo = api.create_qbo()
        assert api.get("/qbo-job-mappings", params={"qboId": qbo["id"]})["count"] == 0
