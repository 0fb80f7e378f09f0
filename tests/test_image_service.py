import unittest

from estate_admin.core.errors import ConfirmationRequired, FormValidationError
from estate_admin.models.project import Project
from estate_admin.services.image_service import ImageSelection, ProjectImageManager
from estate_admin.state import Store

from fakes import FakeSession, image_file, make_client, project_payload

MB = 1024 * 1024


class ImageSelectionTests(unittest.TestCase):
    """Pending image validation and grouping"""

    def test_rejects_non_images(self):
        """Test files without an image MIME type are refused"""
        selection = ImageSelection(limit=10, max_bytes=5 * MB)
        errors = selection.add([image_file("notes.pdf", content_type="application/pdf")])
        self.assertEqual(errors, ["File notes.pdf is not an image"])
        self.assertEqual(len(selection), 0)

    def test_rejects_large_files(self):
        """Test files above the size cap are refused"""
        selection = ImageSelection(limit=10, max_bytes=5 * MB)
        errors = selection.add([image_file("huge.png", size=5 * MB + 1, content_type="image/png")])
        self.assertEqual(errors, ["File huge.png is too large. Maximum size is 5MB"])
        self.assertEqual(len(selection), 0)

    def test_accepts_file_at_size_cap(self):
        """Test a file of exactly the size cap is kept"""
        selection = ImageSelection(limit=10, max_bytes=5 * MB)
        errors = selection.add([image_file("exact.png", size=5 * MB, content_type="image/png")])
        self.assertEqual(errors, [])
        self.assertEqual(len(selection), 1)

    def test_limit_counts_existing_images(self):
        """Test only the remaining slots are filled"""
        selection = ImageSelection(limit=10, max_bytes=5 * MB, reserved=8)
        errors = selection.add([image_file("a.jpg"), image_file("b.jpg"), image_file("c.jpg")])
        self.assertEqual(len(selection), 2)
        self.assertEqual(len(errors), 1)
        self.assertIn("Maximum of 10 images reached", errors[0])
        self.assertEqual(selection.remaining_slots, 0)

    def test_update_rejects_unknown_type(self):
        """Test image types are limited to the known set"""
        selection = ImageSelection(limit=10, max_bytes=5 * MB)
        selection.add([image_file()])
        with self.assertRaises(FormValidationError):
            selection.update(0, image_type="SELFIE")
        selection.update(0, image_type="FLOOR_PLAN", caption="Level 2")
        self.assertEqual(selection.describe()[0]["type"], "FLOOR_PLAN")

    def test_discard_releases_buffer(self):
        """Test a discarded image frees its buffer"""
        selection = ImageSelection(limit=10, max_bytes=5 * MB)
        selection.add([image_file("a.jpg"), image_file("b.jpg")])
        first = selection.images[0]
        selection.discard(0)
        self.assertTrue(first.released)
        self.assertEqual([i.filename for i in selection.images], ["b.jpg"])

    def test_groups_in_first_seen_order(self):
        """Test grouping keeps the order in which pairs first appear"""
        selection = ImageSelection(limit=10, max_bytes=5 * MB)
        selection.add([image_file(f"{n}.jpg") for n in "abcd"])
        selection.update(0, image_type="INTERIOR")
        selection.update(1, image_type="EXTERIOR", caption="Front")
        selection.update(2, image_type="INTERIOR")
        groups = selection.groups()
        self.assertEqual([key for key, _ in groups], [("INTERIOR", ""), ("EXTERIOR", "Front"), ("OTHER", "")])
        self.assertEqual([i.filename for i in groups[0][1]], ["a.jpg", "c.jpg"])


class ProjectImageManagerTests(unittest.TestCase):
    """Images of an existing project"""

    def setUp(self):
        self.session = FakeSession()
        self.client = make_client(self.session)
        self.store = Store()
        images = [{"url": "https://cdn/1.jpg", "type": "EXTERIOR", "caption": "Front"}, {"url": "https://cdn/2.jpg"}]
        self.manager = ProjectImageManager(Project.model_validate(project_payload(images=images)), 10, 5 * MB)

    def test_existing_images_take_slots(self):
        """Test stored images count towards the limit"""
        self.assertEqual(self.manager.selection.remaining_slots, 8)

    def test_delete_needs_confirmation(self):
        """Test deleting a stored image asks for confirmation"""
        with self.assertRaises(ConfirmationRequired):
            self.manager.delete_existing(self.client, self.store, "https://cdn/1.jpg")

    def test_delete_success(self):
        """Test a confirmed delete removes the image after the backend agrees"""
        self.session.route("DELETE", "projects/p-1/images", {"message": "Image deleted successfully"})
        self.session.route("GET", "projects", [project_payload()])
        outcome = self.manager.delete_existing(self.client, self.store, "https://cdn/1.jpg", confirmed=True)
        self.assertTrue(outcome.ok)
        self.assertEqual([i.url for i in self.manager.existing], ["https://cdn/2.jpg"])
        self.assertEqual(self.manager.selection.remaining_slots, 9)
        self.assertEqual(len(self.session.calls_to("GET", "projects")), 1)

    def test_delete_failure_keeps_image(self):
        """Test the image stays when the backend does not confirm"""
        self.session.route("DELETE", "projects/p-1/images", {"statusCode": 404, "message": "Image not found"}, 404)
        outcome = self.manager.delete_existing(self.client, self.store, "https://cdn/1.jpg", confirmed=True)
        self.assertFalse(outcome.ok)
        self.assertEqual(self.manager.error, "Failed to delete image")
        self.assertEqual(len(self.manager.existing), 2)

    def test_upload_success(self):
        """Test a successful upload releases buffers and refetches projects"""
        self.manager.add_files([image_file("a.jpg"), image_file("b.jpg")])
        pending = list(self.manager.selection.images)
        self.session.route("POST", "projects/p-1/upload-images", [{"url": "u1"}, {"url": "u2"}])
        self.session.route("GET", "projects", [project_payload()])

        outcome = self.manager.upload(self.client, self.store)

        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.notice.message, "Successfully uploaded 2 images!")
        self.assertEqual(len(self.session.calls_to("POST", "projects/p-1/upload-images")), 1)
        self.assertTrue(all(image.released for image in pending))
        self.assertEqual(len(self.manager.selection), 0)

    def test_upload_non_list_response_fails(self):
        """Test an upload answered with anything but a list is a failure"""
        self.manager.add_files([image_file("a.jpg")])
        self.session.route("POST", "projects/p-1/upload-images", {"message": "Upload failed"})
        outcome = self.manager.upload(self.client, self.store)
        self.assertFalse(outcome.ok)
        self.assertEqual(len(self.manager.selection), 1)

    def test_upload_nothing(self):
        """Test uploading with nothing pending only refetches"""
        self.session.route("GET", "projects", [])
        outcome = self.manager.upload(self.client, self.store)
        self.assertEqual(outcome.notice.level, "info")
        self.assertEqual(self.session.calls_to("POST", "projects/p-1/upload-images"), [])
