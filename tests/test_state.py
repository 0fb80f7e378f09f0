import unittest

from pydantic import ValidationError

from estate_admin.models.employee import Employee
from estate_admin.models.office import Office
from estate_admin.models.project import Project
from estate_admin.models.user import SessionUser
from estate_admin.state import AppState, Store, parse_action
from estate_admin.state.admin import (
    AdminState,
    AddOffice,
    AddProjectAmenity,
    AppendProjectAssignment,
    RemoveProjectAmenity,
    ResetOfficeForm,
    SetEmployees,
    SetError,
    SetLoading,
    SetOfficeFormField,
    SetOffices,
    SetProjectFormField,
    SetProjects,
    SetSelectedTab,
)
from estate_admin.state.session import ClearError, LoginFailure, LoginStart, LoginSuccess, Logout, SessionState

from fakes import employee_payload, project_payload


class SessionReducerTests(unittest.TestCase):
    """Session transitions"""

    def setUp(self):
        self.store = Store()
        self.user = SessionUser.model_validate(employee_payload(role="admin"))

    def test_login_start_sets_loading(self):
        """Test LoginStart raises the loading flag"""
        self.store.dispatch(LoginStart())
        self.assertTrue(self.store.state.auth.isLoading)

    def test_login_success(self):
        """Test LoginSuccess stores the user and clears the error"""
        self.store.dispatch(LoginFailure(message="bad"))
        self.store.dispatch(LoginSuccess(user=self.user))
        auth = self.store.state.auth
        self.assertTrue(auth.isAuthenticated)
        self.assertFalse(auth.isLoading)
        self.assertIsNone(auth.error)
        self.assertEqual(auth.user.role, "ADMIN")

    def test_login_failure(self):
        """Test LoginFailure keeps the session anonymous with the message"""
        self.store.dispatch(LoginStart())
        self.store.dispatch(LoginFailure(message="Invalid credentials"))
        auth = self.store.state.auth
        self.assertFalse(auth.isAuthenticated)
        self.assertFalse(auth.isLoading)
        self.assertEqual(auth.error, "Invalid credentials")

    def test_logout_resets_session(self):
        """Test Logout returns to the anonymous default"""
        self.store.dispatch(LoginSuccess(user=self.user))
        self.store.dispatch(Logout())
        self.assertEqual(self.store.state.auth, SessionState())

    def test_clear_error(self):
        """Test ClearError drops the login error"""
        self.store.dispatch(LoginFailure(message="bad"))
        self.store.dispatch(ClearError())
        self.assertIsNone(self.store.state.auth.error)


class AdminReducerTests(unittest.TestCase):
    """Admin lists, drafts and the shared loading/error pair"""

    def setUp(self):
        self.store = Store()

    def test_lists_are_replaced_wholesale(self):
        """Test SetOffices replaces the previous list"""
        self.store.dispatch(SetOffices(offices=(Office(id="1", name="HQ"), Office(id="2", name="Annex"))))
        self.store.dispatch(SetOffices(offices=(Office(id="3", name="Pune"),)))
        self.assertEqual([o.id for o in self.store.state.admin.offices], ["3"])

    def test_add_appends(self):
        """Test AddOffice appends to the list"""
        self.store.dispatch(AddOffice(office=Office(id="1", name="HQ")))
        self.store.dispatch(AddOffice(office=Office(id="2", name="Annex")))
        self.assertEqual([o.name for o in self.store.state.admin.offices], ["HQ", "Annex"])

    def test_form_field_update(self):
        """Test a valid field update lands in the draft"""
        self.store.dispatch(SetOfficeFormField(field="name", value="HQ"))
        self.store.dispatch(SetOfficeFormField(field="isMainOffice", value=True))
        form = self.store.state.admin.officeForm
        self.assertEqual(form.name, "HQ")
        self.assertTrue(form.isMainOffice)

    def test_unknown_field_is_rejected(self):
        """Test an unknown field name leaves the state untouched"""
        before = self.store.state
        with self.assertRaises(ValidationError):
            self.store.dispatch(SetOfficeFormField(field="floor", value="3"))
        self.assertIs(self.store.state, before)

    def test_wrong_value_type_is_rejected(self):
        """Test a value of the wrong type leaves the draft untouched"""
        with self.assertRaises(ValidationError):
            self.store.dispatch(SetProjectFormField(field="totalUnits", value="many"))
        self.assertEqual(self.store.state.admin.projectForm.totalUnits, 1)

    def test_reset_form(self):
        """Test resetting the office draft restores initial values"""
        self.store.dispatch(SetOfficeFormField(field="name", value="HQ"))
        self.store.dispatch(ResetOfficeForm())
        self.assertEqual(self.store.state.admin.officeForm.name, "")
        self.assertFalse(self.store.state.admin.officeForm.isMainOffice)

    def test_initial_project_draft(self):
        """Test the project draft starts from the documented defaults"""
        draft = self.store.state.admin.projectForm
        self.assertEqual(draft.projectType, "RESIDENTIAL")
        self.assertEqual(draft.propertyType, "APARTMENT")
        self.assertEqual(draft.totalUnits, 1)
        self.assertEqual(draft.areaUnit, "sqft")
        self.assertEqual(draft.amenities, [""])
        self.assertEqual(draft.currency, "INR")
        self.assertEqual(draft.images, [])

    def test_initial_employee_role(self):
        """Test the employee draft defaults to SALES_EXECUTIVE"""
        self.assertEqual(self.store.state.admin.employeeForm.role, "SALES_EXECUTIVE")

    def test_employee_roles_are_uppercased(self):
        """Test lowercase roles from the backend are kept uppercase"""
        self.store.dispatch(SetEmployees(employees=(Employee.model_validate(employee_payload(role="sales_manager")),)))
        self.assertEqual(self.store.state.admin.employees[0].role, "SALES_MANAGER")

    def test_append_assignment(self):
        """Test an assignment is appended to the matching project only"""
        projects = (
            Project.model_validate(project_payload(id="p-1")),
            Project.model_validate(project_payload(id="p-2")),
        )
        self.store.dispatch(SetProjects(projects=projects))
        self.store.dispatch(AppendProjectAssignment(projectId="p-2", assignment={"employeeId": "e-1"}))
        admin = self.store.state.admin
        self.assertEqual(admin.projects[0].assignedEmployees, [])
        self.assertEqual(admin.projects[1].assignedEmployees, [{"employeeId": "e-1"}])

    def test_loading_and_error(self):
        """Test the shared loading flag and error message"""
        self.store.dispatch(SetLoading(value=True))
        self.store.dispatch(SetError(message="boom"))
        self.assertTrue(self.store.state.admin.isLoading)
        self.assertEqual(self.store.state.admin.error, "boom")

    def test_selected_tab(self):
        """Test SetSelectedTab switches the visible section"""
        self.store.dispatch(SetSelectedTab(tab="projects"))
        self.assertEqual(self.store.state.admin.selectedTab, "projects")

    def test_logout_resets_admin_state(self):
        """Test logging out drops lists, drafts, tab and error"""
        self.store.dispatch(SetOffices(offices=(Office(id="1", name="HQ"),)))
        self.store.dispatch(SetOfficeFormField(field="name", value="Half typed"))
        self.store.dispatch(SetSelectedTab(tab="offices"))
        self.store.dispatch(SetError(message="boom"))
        self.store.dispatch(Logout())
        self.assertEqual(self.store.state.admin, AdminState())

    def test_amenity_actions(self):
        """Test amenities are trimmed and de-duplicated inside the reducer"""
        self.store.dispatch(AddProjectAmenity(name=" Pool "))
        self.store.dispatch(AddProjectAmenity(name="Pool"))
        self.store.dispatch(AddProjectAmenity(name="Gym"))
        self.assertEqual(self.store.state.admin.projectForm.amenities, ["Pool", "Gym"])
        self.store.dispatch(RemoveProjectAmenity(index=0))
        self.assertEqual(self.store.state.admin.projectForm.amenities, ["Gym"])

    def test_remove_missing_amenity(self):
        """Test removing past the end raises and keeps the snapshot"""
        before = self.store.state
        with self.assertRaises(IndexError):
            self.store.dispatch(RemoveProjectAmenity(index=3))
        self.assertIs(self.store.state, before)


class StoreTests(unittest.TestCase):
    """Dispatch, subscription and action parsing"""

    def test_listeners_are_notified_on_change(self):
        """Test subscribers receive the new state and the action"""
        store = Store()
        seen = []
        store.subscribe(lambda state, action: seen.append((state.admin.selectedTab, action.type)))
        store.dispatch(SetSelectedTab(tab="offices"))
        self.assertEqual(seen, [("offices", "admin/setSelectedTab")])

    def test_unsubscribe(self):
        """Test an unsubscribed listener is no longer called"""
        store = Store()
        seen = []
        unsubscribe = store.subscribe(lambda state, action: seen.append(action))
        unsubscribe()
        store.dispatch(SetSelectedTab(tab="offices"))
        self.assertEqual(seen, [])

    def test_unrelated_action_keeps_snapshot(self):
        """Test an action no reducer handles returns the same snapshot"""
        store = Store()
        before = store.state
        store.dispatch(object())
        self.assertIs(store.state, before)

    def test_parse_action(self):
        """Test raw messages are parsed into typed actions"""
        action = parse_action({"type": "admin/setOfficeFormField", "field": "name", "value": "HQ"})
        self.assertIsInstance(action, SetOfficeFormField)
        with self.assertRaises(ValidationError):
            parse_action({"type": "admin/unknown"})

    def test_initial_state(self):
        """Test a new store starts anonymous with empty lists"""
        state = Store().state
        self.assertIsInstance(state, AppState)
        self.assertFalse(state.auth.isAuthenticated)
        self.assertEqual(state.admin.projects, ())
