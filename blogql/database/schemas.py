"""
MongoDB document schemas for validation.

These schemas define the structure of documents stored in MongoDB.
"""

from typing import Dict, Any

from bson import ObjectId
from datetime import datetime

# =============================================================================
# User Document Schema
# =============================================================================

USER_SCHEMA: Dict[str, Any] = {
    "_id": ObjectId,                      # Store-assigned identifier
    "email": str,                         # Unique, case-sensitive
    "name": str,                          # Display name
    "password": str,                      # bcrypt hash, never emitted
    "status": str,                        # Free text, owner-mutable
    "posts": [ObjectId],                  # Owned post references, creation order
    "created_at": datetime,
    "updated_at": datetime,
}

DEFAULT_USER_STATUS = "I am new!"


# =============================================================================
# Post Document Schema
# =============================================================================

POST_SCHEMA: Dict[str, Any] = {
    "_id": ObjectId,
    "title": str,                         # >= 4 characters
    "content": str,                       # >= 10 characters
    "image_url": str,                     # Path under the images directory
    "creator": ObjectId,                  # Owning user, immutable
    "created_at": datetime,
    "updated_at": datetime,
}


# =============================================================================
# MongoDB Validators
# =============================================================================

def create_user_validator() -> Dict[str, Any]:
    """Create MongoDB JSON Schema validator for users collection."""
    return {
        "$jsonSchema": {
            "bsonType": "object",
            "required": ["email", "name", "password", "status", "posts"],
            "properties": {
                "email": {"bsonType": "string"},
                "name": {"bsonType": "string"},
                "password": {"bsonType": "string"},
                "status": {"bsonType": "string"},
                "posts": {
                    "bsonType": "array",
                    "items": {"bsonType": "objectId"}
                },
                "created_at": {"bsonType": "date"},
                "updated_at": {"bsonType": "date"},
            }
        }
    }


def create_post_validator() -> Dict[str, Any]:
    """Create MongoDB JSON Schema validator for posts collection."""
    return {
        "$jsonSchema": {
            "bsonType": "object",
            "required": ["title", "content", "image_url", "creator", "created_at", "updated_at"],
            "properties": {
                "title": {"bsonType": "string", "minLength": 4},
                "content": {"bsonType": "string", "minLength": 10},
                "image_url": {"bsonType": "string"},
                "creator": {"bsonType": "objectId"},
                "created_at": {"bsonType": "date"},
                "updated_at": {"bsonType": "date"},
            }
        }
    }
