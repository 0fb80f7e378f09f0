import unittest

import requests

from estate_admin.core.errors import ConfirmationRequired, FormValidationError
from estate_admin.models.employee import Employee
from estate_admin.models.project import Project
from estate_admin.services import (
    dashboard_service,
    developer_service,
    employee_service,
    office_service,
    project_service,
)
from estate_admin.state import Store
from estate_admin.state.admin import SetEmployees, SetProjects

from fakes import FakeSession, employee_payload, make_client, project_payload


class OfficeServiceTests(unittest.TestCase):
    """Office form submission and maintenance"""

    def setUp(self):
        self.session = FakeSession()
        self.client = make_client(self.session)
        self.store = Store()

    def test_create_office(self):
        """Test a created office refetches the list and resets the draft"""
        self.session.route("POST", "offices", {"id": "o-1", "name": "HQ"})
        self.session.route("GET", "offices", [{"id": "o-1", "name": "HQ"}])
        office_service.set_office_field(self.store, "name", "HQ")
        office_service.set_office_field(self.store, "city", "Pune")

        outcome = office_service.create_office(self.client, self.store)

        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.notice.message, "Office created successfully")
        self.assertEqual(self.session.calls[0].json, {"name": "HQ", "city": "Pune", "isMainOffice": False})
        self.assertEqual([o.id for o in self.store.state.admin.offices], ["o-1"])
        self.assertEqual(self.store.state.admin.officeForm.name, "")
        self.assertFalse(self.store.state.admin.isLoading)

    def test_create_office_requires_name(self):
        """Test a blank office name is rejected before any call"""
        with self.assertRaises(FormValidationError) as ctx:
            office_service.create_office(self.client, self.store)
        self.assertEqual(ctx.exception.errors["name"], ["Office name is required"])
        self.assertEqual(self.session.calls, [])

    def test_create_office_without_id(self):
        """Test a response without an id is a failure and keeps the draft"""
        self.session.route("POST", "offices", {"statusCode": 400, "message": ["name must be unique"]}, 400)
        office_service.set_office_field(self.store, "name", "HQ")
        outcome = office_service.create_office(self.client, self.store)
        self.assertFalse(outcome.ok)
        self.assertEqual(outcome.notice.message, "name must be unique")
        self.assertEqual(self.store.state.admin.error, "name must be unique")
        self.assertEqual(self.store.state.admin.officeForm.name, "HQ")

    def test_network_failure(self):
        """Test a network failure lands in the shared error"""
        self.session.fail("POST", "offices", requests.ConnectionError("refused"))
        office_service.set_office_field(self.store, "name", "HQ")
        outcome = office_service.create_office(self.client, self.store)
        self.assertFalse(outcome.ok)
        self.assertEqual(self.store.state.admin.error, "refused")
        self.assertFalse(self.store.state.admin.isLoading)

    def test_delete_requires_confirmation(self):
        """Test deleting without confirmation asks for it"""
        with self.assertRaises(ConfirmationRequired):
            office_service.delete_office(self.client, self.store, "o-1")
        self.assertEqual(self.session.calls, [])

    def test_delete_confirmed(self):
        """Test a confirmed delete refetches the list"""
        self.session.route("DELETE", "offices/o-1", {"message": "deleted"})
        self.session.route("GET", "offices", [])
        outcome = office_service.delete_office(self.client, self.store, "o-1", confirmed=True)
        self.assertTrue(outcome.ok)
        self.assertEqual(len(self.session.calls_to("GET", "offices")), 1)

    def test_unknown_form_field(self):
        """Test an unknown draft field is reported per field"""
        with self.assertRaises(FormValidationError) as ctx:
            office_service.set_office_field(self.store, "floor", 3)
        self.assertIn("floor", ctx.exception.errors)


class EmployeeServiceTests(unittest.TestCase):
    """Employee creation and manager selection"""

    def setUp(self):
        self.session = FakeSession()
        self.client = make_client(self.session)
        self.store = Store()

    def test_create_employee(self):
        """Test the role goes out lowercase and a blank employee id is omitted"""
        self.session.route("POST", "employees", {"id": "e-1"})
        self.session.route("GET", "employees", [employee_payload(id="e-1", role="sales_executive")])
        for field, value in {
            "username": "ravi",
            "password": "secret1",
            "name": "Ravi",
            "email": "ravi@example.com",
            "officeId": "o-1",
            "role": "SALES_EXECUTIVE",
        }.items():
            employee_service.set_employee_field(self.store, field, value)

        outcome = employee_service.create_employee(self.client, self.store)

        self.assertTrue(outcome.ok)
        sent = self.session.calls[0].json
        self.assertEqual(sent["role"], "sales_executive")
        self.assertNotIn("employeeId", sent)
        self.assertEqual(self.store.state.admin.employees[0].role, "SALES_EXECUTIVE")

    def test_create_employee_validation(self):
        """Test short passwords and bad emails are rejected"""
        employee_service.set_employee_field(self.store, "password", "123")
        employee_service.set_employee_field(self.store, "email", "not-an-email")
        with self.assertRaises(FormValidationError) as ctx:
            employee_service.create_employee(self.client, self.store)
        errors = ctx.exception.errors
        for field in ("username", "password", "name", "email", "officeId"):
            self.assertIn(field, errors)

    def test_manager_options(self):
        """Test only managing roles are offered when present"""
        employees = [
            Employee.model_validate(employee_payload(id="1", role="admin")),
            Employee.model_validate(employee_payload(id="2", role="sales_executive")),
            Employee.model_validate(employee_payload(id="3", role="sales_manager")),
        ]
        self.assertEqual([e.id for e in employee_service.manager_options(employees)], ["1", "3"])

    def test_manager_options_fallback(self):
        """Test everyone is offered when nobody has a managing role"""
        employees = [Employee.model_validate(employee_payload(id="2", role="finance"))]
        self.assertEqual(employee_service.manager_options(employees), employees)


class ProjectServiceTests(unittest.TestCase):
    """Project edit, publish, assignment and amenities"""

    def setUp(self):
        self.session = FakeSession()
        self.client = make_client(self.session)
        self.store = Store()
        self.store.dispatch(SetProjects(projects=(Project.model_validate(project_payload()),)))

    def test_clean_project_values(self):
        """Test blank amenities, blank text and zero prices are dropped"""
        cleaned = project_service.clean_project_values(
            {"amenities": ["Pool", " ", ""], "reraNumber": "  ", "minPrice": 0, "maxPrice": 10, "currency": "INR"}
        )
        self.assertEqual(cleaned["amenities"], ["Pool"])
        self.assertIsNone(cleaned["reraNumber"])
        self.assertIsNone(cleaned["minPrice"])
        self.assertEqual(cleaned["maxPrice"], 10)
        self.assertEqual(cleaned["currency"], "INR")

    def test_toggle_publish(self):
        """Test an unpublished project is published with a status-only patch"""
        self.session.route("PATCH", "projects/p-1/publish", {"id": "p-1", "status": "PUBLISHED"})
        self.session.route("GET", "projects", [project_payload(status="PUBLISHED")])
        outcome = project_service.toggle_publish(self.client, self.store, "p-1")
        self.assertTrue(outcome.ok)
        self.assertEqual(self.session.calls[0].json, {"status": "PUBLISHED"})
        self.assertEqual(self.store.state.admin.projects[0].status, "PUBLISHED")

    def test_toggle_unpublish(self):
        """Test a published project is unpublished"""
        self.store.dispatch(SetProjects(projects=(Project.model_validate(project_payload(status="PUBLISHED")),)))
        self.session.route("PATCH", "projects/p-1/publish", {"id": "p-1"})
        self.session.route("GET", "projects", [project_payload()])
        project_service.toggle_publish(self.client, self.store, "p-1")
        self.assertEqual(self.session.calls[0].json, {"status": "UNPUBLISHED"})

    def test_assign_employee_appends_before_refetch(self):
        """Test the returned assignment is appended locally"""
        assignment = {"employeeId": "e-1", "role": "SALES"}
        self.session.route("POST", "projects/p-1/employees", assignment)
        self.session.fail("GET", "projects", requests.ConnectionError("refused"))
        outcome = project_service.assign_employee(self.client, self.store, "p-1", "e-1", "SALES", "2025-02-01")
        self.assertTrue(outcome.ok)
        self.assertEqual(self.session.calls[0].json, {"employeeId": "e-1", "role": "SALES", "assignedDate": "2025-02-01"})
        self.assertEqual(self.store.state.admin.projects[0].assignedEmployees, [assignment])

    def test_update_project_cleans_payload(self):
        """Test an edit goes through the same cleaning as creation"""
        self.session.route("PATCH", "projects/p-1", {"id": "p-1"})
        self.session.route("GET", "projects", [project_payload()])
        data = project_payload(amenities=["Gym", ""], minPrice=0, reraWebsite="")
        data.pop("id")
        outcome = project_service.update_project(self.client, self.store, "p-1", data)
        self.assertTrue(outcome.ok)
        sent = self.session.calls[0].json
        self.assertEqual(sent["amenities"], ["Gym"])
        self.assertNotIn("minPrice", sent)
        self.assertNotIn("reraWebsite", sent)

    def test_update_project_validation(self):
        """Test an out of range latitude is rejected"""
        data = project_payload(latitude=120)
        with self.assertRaises(FormValidationError) as ctx:
            project_service.update_project(self.client, self.store, "p-1", data)
        self.assertIn("latitude", ctx.exception.errors)

    def test_amenities(self):
        """Test amenities are trimmed, de-duplicated and removed by index"""
        project_service.add_amenity(self.store, "  Pool ")
        project_service.add_amenity(self.store, "Pool")
        project_service.add_amenity(self.store, "Gym")
        self.assertEqual(self.store.state.admin.projectForm.amenities, ["Pool", "Gym"])
        self.assertEqual(project_service.remove_amenity(self.store, 0), ["Gym"])
        with self.assertRaises(FormValidationError):
            project_service.remove_amenity(self.store, 5)

    def test_refresh_ignores_non_list(self):
        """Test an error body does not wipe the current list"""
        self.session.route("GET", "projects", {"statusCode": 500, "message": "boom"}, 500)
        self.assertIsNone(project_service.refresh_projects(self.client, self.store))
        self.assertEqual(len(self.store.state.admin.projects), 1)


class DeveloperServiceTests(unittest.TestCase):
    """Developer maintenance"""

    def test_list_developers_on_failure(self):
        """Test a failing list call yields an empty list"""
        session = FakeSession().fail("GET", "real-estate-developers", requests.Timeout("slow"))
        self.assertEqual(developer_service.list_developers(make_client(session)), [])

    def test_create_developer_validation(self):
        """Test the owner password must be at least six characters"""
        with self.assertRaises(FormValidationError) as ctx:
            developer_service.create_developer(
                make_client(FakeSession()),
                Store(),
                {"name": "Acme", "ownerUsername": "o", "ownerPassword": "123", "ownerEmail": "o@x.io", "ownerName": "O"},
            )
        self.assertIn("ownerPassword", ctx.exception.errors)


class DashboardServiceTests(unittest.TestCase):
    """Overview figures"""

    def test_overview(self):
        """Test counts, per-role totals, recent projects and manager options"""
        session = FakeSession()
        session.route("GET", "offices", [{"id": "o-1", "name": "HQ"}])
        session.route("GET", "employees", [employee_payload(id="1", role="manager"), employee_payload(id="2", role="sales")])
        session.route(
            "GET",
            "projects",
            [project_payload(id=f"p-{i}", status="PUBLISHED" if i % 2 else "UNPUBLISHED") for i in range(5)],
        )
        store = Store()
        dashboard_service.load_initial_data(make_client(session), store)

        overview = dashboard_service.overview(store.state)

        self.assertEqual(
            overview["counts"],
            {"offices": 1, "employees": 2, "projects": 5, "publishedProjects": 2, "draftProjects": 3},
        )
        self.assertEqual([p["id"] for p in overview["recentProjects"]], ["p-0", "p-1", "p-2"])
        self.assertEqual([e["id"] for e in overview["managerOptions"]], ["1"])
        self.assertEqual(overview["employeesByRole"], {"MANAGER": 1, "SALES": 1})

    def test_set_selected_tab(self):
        """Test an unknown tab is rejected"""
        store = Store()
        self.assertEqual(dashboard_service.set_selected_tab(store, "employees"), "employees")
        with self.assertRaises(FormValidationError):
            dashboard_service.set_selected_tab(store, "reports")

    def test_manager_options_use_store(self):
        """Test overview reads employees from the store"""
        store = Store()
        store.dispatch(SetEmployees(employees=(Employee.model_validate(employee_payload(id="9", role="finance")),)))
        self.assertEqual([e["id"] for e in dashboard_service.overview(store.state)["managerOptions"]], ["9"])
