# Path templates relative to the configured backend base URL.

# Authentication
LOGIN = "auth/login"
REGISTER = "auth/register"
USER_PROFILE = "auth/profile"

# Real estate developers
DEVELOPERS = "real-estate-developers"
DEVELOPER = "real-estate-developers/{id}"

# Offices
OFFICES = "offices"
OFFICE = "offices/{id}"

# Employees
EMPLOYEES = "employees"
EMPLOYEE = "employees/{id}"
CHANGE_PASSWORD = "employees/change-password"

# Projects
PROJECTS = "projects"
PUBLISHED_PROJECTS = "projects/published"
PROJECT = "projects/{id}"
PUBLISH_PROJECT = "projects/{id}/publish"
PROJECT_EMPLOYEES = "projects/{id}/employees"
PROJECT_EMPLOYEE = "projects/{id}/employees/{employee_id}"
UPLOAD_PROJECT_IMAGES = "projects/{id}/upload-images"
PROJECT_IMAGES = "projects/{id}/images"

# Health check lives at the base URL root
HEALTH_CHECK = ""
