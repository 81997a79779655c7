_record_example = {
    "id": "8d2f5a4c-1b7e-4c0a-9f3d-2e6b8a1c4d5f",
    "name": "node-exporter-push",
    "key_prefix": "cmdb_Qm9vYmF",
    "created_by": "3f6c1f0e-6f3b-4f36-9b55-0f1d7c2b9a11",
    "is_active": True,
    "expires_at": None,
    "last_used_at": None,
    "created_at": "2025-12-10T10:30:00Z",
}

_admin_required = {
    "description": "Forbidden",
    "content": {
        "application/json": {
            "examples": {
                "not_admin": {
                    "summary": "Admin Required",
                    "value": {"error": "Admin access required"},
                }
            }
        }
    },
}

create_api_key_responses = {
    201: {
        "description": "API Key Created Successfully",
        "content": {
            "application/json": {
                "examples": {
                    "success": {
                        "summary": "API Key Created",
                        "value": {
                            "key": "<API_KEY>",
                            "key_prefix": "cmdb_Qm9vYmF",
                            "record": _record_example,
                        },
                    }
                }
            }
        },
    },
    400: {
        "description": "Bad Request",
        "content": {
            "application/json": {
                "examples": {
                    "invalid_body": {
                        "summary": "Missing Name",
                        "value": {"error": "Invalid request body"},
                    }
                }
            }
        },
    },
    403: _admin_required,
}

list_api_keys_responses = {
    200: {
        "description": "API Keys Retrieved",
        "content": {
            "application/json": {
                "examples": {
                    "success": {"summary": "Key Metadata", "value": [_record_example]}
                }
            }
        },
    },
    403: _admin_required,
}

api_key_status_responses = {
    200: {
        "description": "API Key Updated",
        "content": {
            "application/json": {
                "examples": {
                    "success": {"summary": "Updated", "value": {"message": "updated"}}
                }
            }
        },
    },
    403: _admin_required,
    404: {
        "description": "Not Found",
        "content": {
            "application/json": {
                "examples": {
                    "missing": {
                        "summary": "Unknown Key",
                        "value": {"error": "API key not found"},
                    }
                }
            }
        },
    },
}

delete_api_key_responses = {
    **api_key_status_responses,
    200: {
        "description": "API Key Deleted",
        "content": {
            "application/json": {
                "examples": {
                    "success": {"summary": "Deleted", "value": {"message": "deleted"}}
                }
            }
        },
    },
}
