"""API tests for jobs, tasks, job impact and task progress."""

from ecofire.models import Job, Task


class TestJobs:
    def test_create_defaults(self, api):
        job = api.create_job(title="Call customers")

        assert job["title"] == "Call customers"
        assert job["isDone"] is False
        assert job["impact"] == 0
        assert job["tasks"] == []
        assert job["nextTaskId"] is None
        assert job["createdDate"] is not None

    def test_toggle_flips_done(self, api):
        job = api.create_job()

        toggled = api.post(f"/jobs/{job['id']}/toggle", expected=200)["data"]
        assert toggled["isDone"] is True

        toggled = api.post(f"/jobs/{job['id']}/toggle", expected=200)["data"]
        assert toggled["isDone"] is False

    def test_filter_by_done(self, api):
        api.create_job(title="Open job")
        api.create_job(title="Done job", is_done=True)

        assert [j["title"] for j in api.get("/jobs", params={"isDone": "true"})["data"]] == ["Done job"]
        assert [j["title"] for j in api.get("/jobs", params={"isDone": "false"})["data"]] == ["Open job"]
        assert api.get("/jobs")["count"] == 2

    def test_update(self, api):
        job = api.create_job()
        updated = api.put(f"/jobs/{job['id']}", json={"title": "Renamed", "isDone": True})["data"]

        assert updated["title"] == "Renamed"
        assert updated["isDone"] is True

    def test_explicit_null_clears_fields(self, api):
        job = api.post(
            "/jobs", json={"title": "Call customers", "notes": "Use the new list", "dueDate": "2026-11-01T09:00:00"}
        )["data"]

        updated = api.put(f"/jobs/{job['id']}", json={"notes": None, "dueDate": None})["data"]

        assert updated["notes"] is None
        assert updated["dueDate"] is None
        assert updated["title"] == "Call customers"

    def test_null_title_is_rejected(self, api):
        job = api.create_job()
        body = api.put(f"/jobs/{job['id']}", json={"title": None}, expected=400)
        assert body["error"] == "title cannot be null"

    def test_soft_delete_hides_job_but_keeps_mappings(self, api):
        pi = api.create_pi()
        job = api.create_job()
        api.map_job_to_pi(job["id"], pi["id"], 10)

        assert api.delete(f"/jobs/{job['id']}")["message"] == "Job deleted successfully"

        assert api.get("/jobs")["count"] == 0
        assert api.get(f"/jobs/{job['id']}", expected=404)["error"] == "Job not found"
        assert api.get("/pi-job-mappings")["count"] == 1

    def test_hard_delete_removes_tasks_and_mappings(self, api, db_session):
        pi = api.create_pi()
        job = api.create_job()
        api.map_job_to_pi(job["id"], pi["id"], 10)
        api.post(f"/jobs/{job['id']}/tasks", json={"title": "Draft list"})

        api.delete(f"/jobs/{job['id']}", params={"hard": "true"})

        assert api.get("/pi-job-mappings")["count"] == 0
        assert db_session.query(Task).count() == 0

    def test_unknown_job(self, api):
        api.post("/jobs/does-not-exist/toggle", expected=404)
        api.put("/jobs/does-not-exist", json={"title": "Nope"}, expected=404)

    def test_invalid_title(self, api):
        api.post("/jobs", json={"title": ""}, expected=422)


class TestTasks:
    def test_first_task_becomes_next_task(self, api):
        job = api.create_job()
        first = api.post(f"/jobs/{job['id']}/tasks", json={"title": "Step one"})["data"]
        api.post(f"/jobs/{job['id']}/tasks", json={"title": "Step two"})

        fetched = api.get(f"/jobs/{job['id']}")["data"]
        assert fetched["nextTaskId"] == first["id"]
        assert len(fetched["tasks"]) == 2

    def test_task_crud(self, api):
        job = api.create_job()
        task = api.post(
            f"/jobs/{job['id']}/tasks",
            json={"title": "Prepare deck", "owner": "Sam", "requiredHours": 2.5, "focusLevel": "High"},
        )["data"]
        assert task["jobId"] == job["id"]
        assert task["completed"] is False

        updated = api.put(
            f"/jobs/{job['id']}/tasks/{task['id']}", json={"completed": True, "joyLevel": "Low"}
        )["data"]
        assert updated["completed"] is True
        assert updated["joyLevel"] == "Low"
        assert updated["focusLevel"] == "High"

        body = api.get(f"/jobs/{job['id']}/tasks")
        assert body["count"] == 1

        api.delete(f"/jobs/{job['id']}/tasks/{task['id']}")
        assert api.get(f"/jobs/{job['id']}/tasks")["count"] == 0
        assert api.get(f"/jobs/{job['id']}")["data"]["nextTaskId"] is None

    def test_invalid_level(self, api):
        job = api.create_job()
        api.post(f"/jobs/{job['id']}/tasks", json={"title": "Task", "focusLevel": "Extreme"}, expected=422)

    def test_next_task_can_be_cleared(self, api):
        job = api.create_job()
        api.post(f"/jobs/{job['id']}/tasks", json={"title": "Step one"})

        updated = api.put(f"/jobs/{job['id']}", json={"nextTaskId": None})["data"]

        assert updated["nextTaskId"] is None

    def test_task_fields_can_be_cleared(self, api):
        job = api.create_job()
        task = api.post(
            f"/jobs/{job['id']}/tasks", json={"title": "Prepare deck", "owner": "Sam", "requiredHours": 3}
        )["data"]

        updated = api.put(
            f"/jobs/{job['id']}/tasks/{task['id']}", json={"owner": None, "requiredHours": None}
        )["data"]

        assert updated["owner"] is None
        assert updated["requiredHours"] is None
        assert updated["title"] == "Prepare deck"

    def test_next_task_must_belong_to_job(self, api):
        job = api.create_job(title="First job")
        other = api.create_job(title="Second job")
        task = api.post(f"/jobs/{other['id']}/tasks", json={"title": "Elsewhere"})["data"]

        body = api.put(f"/jobs/{job['id']}", json={"nextTaskId": task["id"]}, expected=404)
        assert body["error"] == "Task not found"


class TestTaskProgress:
    def add_tasks(self, api, job_id, completed, total):
        for i in range(total):
            api.post(f"/jobs/{job_id}/tasks", json={"title": f"Task {i}", "completed": i < completed})

    def test_progress_for_many_jobs(self, api):
        partial = api.create_job(title="Partial")
        empty = api.create_job(title="Empty")
        self.add_tasks(api, partial["id"], completed=1, total=8)

        body = api.get("/jobs/progress", params=[("ids", partial["id"]), ("ids", empty["id"])])

        # 12.5% rounds half up
        assert body["data"] == {partial["id"]: 13, empty["id"]: 0}

    def test_progress_requires_ids(self, api):
        body = api.get("/jobs/progress", expected=400)
        assert body == {"success": False, "error": "At least one job ID is required"}

    def test_task_counts(self, api):
        job = api.create_job()
        self.add_tasks(api, job["id"], completed=2, total=3)

        body = api.post("/jobs/progress", json={"jobId": job["id"]}, expected=200)

        assert body["data"] == {"total": 3, "completed": 2}

    def test_task_counts_requires_job_id(self, api):
        api.post("/jobs/progress", json={"jobId": ""}, expected=400)


class TestJobImpact:
    def test_impact_follows_mappings(self, api):
        pi_a = api.create_pi(name="Leads")
        pi_b = api.create_pi(name="Demos")
        job = api.create_job()

        api.map_job_to_pi(job["id"], pi_a["id"], 10)
        mapping = api.map_job_to_pi(job["id"], pi_b["id"], 5)
        assert api.get(f"/jobs/{job['id']}")["data"]["impact"] == 15

        api.put(f"/pi-job-mappings/{mapping['id']}", json={"piImpactValue": 7})
        assert api.get(f"/jobs/{job['id']}")["data"]["impact"] == 17

        api.delete(f"/pi-job-mappings/{mapping['id']}")
        assert api.get(f"/jobs/{job['id']}")["data"]["impact"] == 10

    def test_unmapped_jobs_reset_to_zero(self, api):
        pi = api.create_pi()
        job = api.create_job()
        api.map_job_to_pi(job["id"], pi["id"], 10)

        api.delete(f"/pis/{pi['id']}")

        assert api.get(f"/jobs/{job['id']}")["data"]["impact"] == 0

    def test_calculate_impact_endpoint(self, api, db_session):
        pi = api.create_pi()
        mapped = api.create_job(title="Mapped")
        api.create_job(title="Unmapped")
        api.map_job_to_pi(mapped["id"], pi["id"], 4)

        # Drift the stored value behind the API's back
        db_session.query(Job).update({Job.impact: 99})
        db_session.commit()

        body = api.post("/jobs/calculate-impact", expected=200)

        assert body == {"success": True, "jobsUpdated": 1, "message": "Updated impact values for 1 jobs"}
        impacts = {j["title"]: j["impact"] for j in api.get("/jobs")["data"]}
        assert impacts == {"Mapped": 4, "Unmapped": 0}


class TestDuplicateJob:
    def build_source(self, api):
        pi = api.create_pi(name="Leads", target=50)
        source = api.create_job(title="Call customers")
        tasks = [
            api.post(
                f"/jobs/{source['id']}/tasks",
                json={"title": title, "completed": True, "date": "2026-10-01T09:00:00", "owner": "Sam"},
            )["data"]
            for title in ("Draft list", "Make calls")
        ]
        api.put(f"/jobs/{source['id']}", json={"nextTaskId": tasks[1]["id"]})
        api.map_job_to_pi(source["id"], pi["id"], 20)
        return source, pi

    def duplicate(self, api, source_id, title="Call customers again", expected=201):
        body = {"sourceJobId": source_id, "newJobData": {"title": title}}
        return api.post("/jobs/duplicate", json=body, expected=expected)

    def test_copies_tasks_reset(self, api):
        source, _ = self.build_source(api)

        job = self.duplicate(api, source["id"])["data"]

        assert job["id"] != source["id"]
        assert job["title"] == "Call customers again"
        tasks = api.get(f"/jobs/{job['id']}/tasks")["data"]
        assert sorted(t["title"] for t in tasks) == ["Draft list", "Make calls"]
        assert all(t["completed"] is False and t["date"] is None for t in tasks)
        assert all(t["owner"] == "Sam" for t in tasks)

    def test_next_task_follows_the_source(self, api):
        source, _ = self.build_source(api)

        job = self.duplicate(api, source["id"])["data"]

        tasks = {t["id"]: t["title"] for t in api.get(f"/jobs/{job['id']}/tasks")["data"]}
        assert tasks[job["nextTaskId"]] == "Make calls"

    def test_next_task_falls_back_to_a_copied_task(self, api):
        source, _ = self.build_source(api)
        api.put(f"/jobs/{source['id']}", json={"nextTaskId": None})

        job = self.duplicate(api, source["id"])["data"]

        task_ids = {t["id"] for t in api.get(f"/jobs/{job['id']}/tasks")["data"]}
        assert job["nextTaskId"] in task_ids

    def test_copies_output_mappings_and_impact(self, api):
        source, pi = self.build_source(api)

        job = self.duplicate(api, source["id"])["data"]

        mappings = api.get("/pi-job-mappings", params={"jobId": job["id"]})["data"]
        assert len(mappings) == 1
        assert mappings[0]["piId"] == pi["id"]
        assert mappings[0]["piImpactValue"] == 20
        assert mappings[0]["notes"] == "Duplicated from job: Call customers"
        assert job["impact"] == 20
        # The source keeps its own mapping
        assert api.get("/pi-job-mappings", params={"jobId": source["id"]})["count"] == 1

    def test_job_without_tasks_or_mappings(self, api):
        source = api.create_job(title="Bare job")

        job = self.duplicate(api, source["id"])["data"]

        assert job["tasks"] == []
        assert job["nextTaskId"] is None
        assert job["impact"] == 0

    def test_source_is_required(self, api):
        body = api.post("/jobs/duplicate", json={"newJobData": {"title": "Copy"}}, expected=400)
        assert body["error"] == "Source job ID is required"

    def test_unknown_or_deleted_source(self, api):
        assert self.duplicate(api, "nope", expected=404)["error"] == "Source job not found"

        source = api.create_job()
        api.delete(f"/jobs/{source['id']}")
        self.duplicate(api, source["id"], expected=404)

    def test_new_job_data_is_validated(self, api):
        source = api.create_job()
        self.duplicate(api, source["id"], title="", expected=422)
