from flask import Flask, request, jsonify, Blueprint, current_app, make_response
from flask_jwt_extended import (
    JWTManager, create_access_token, current_user, get_jwt, verify_jwt_in_request,
    set_access_cookies, set_refresh_cookies, unset_jwt_cookies,
)
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import SQLAlchemyError
from flask_migrate import Migrate
from sqlalchemy import func
from flask_bcrypt import Bcrypt
from flasgger import Swagger
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from werkzeug.utils import secure_filename
from datetime import datetime, timezone
import cloudinary
import cloudinary.uploader
import requests
import uuid
import os
