from core.imports import cloudinary, secure_filename, uuid, os
from core.errors import ValidationError, ServerError
from core.logger import get_logger

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}


def allowed_file(filename):
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


class CloudinaryImageHost:

    def __init__(self, cloud_name, api_key, api_secret, folder="products"):
        self.folder = folder
        cloudinary.config(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret, secure=True)

    def upload(self, local_path):
        result = cloudinary.uploader.upload(local_path, folder=self.folder, resource_type="auto")
        return result.get("secure_url") or result.get("url")


def store_upload(file, upload_folder, image_host):
    """
    Saves an uploaded file to the staging folder, pushes it to the image
    host and removes the local copy. Returns the hosted URL.
    """
    if file is None or file.filename == "":
        raise ValidationError("Product image file is required.")
    if not allowed_file(file.filename):
        raise ValidationError(f"File type not allowed for '{secure_filename(file.filename)}'")

    extension = file.filename.rsplit(".", 1)[1].lower()
    filename = secure_filename(f"{uuid.uuid4().hex}.{extension}")
    os.makedirs(upload_folder, exist_ok=True)
    local_path = os.path.join(upload_folder, filename)
    file.save(local_path)

    try:
        url = image_host.upload(local_path)
    except Exception as e:
        logger.exception(f"Image upload failed for {filename}")
        raise ServerError("Could not upload the product image.") from e
    finally:
        if os.path.exists(local_path):
            os.remove(local_path)

    if not url:
        raise ServerError("Could not upload the product image.")
    return url
