def _error_example(summary: str, message: str) -> dict:
    return {"summary": summary, "value": {"error": message}}


_user_example = {
    "id": "3f6c1f0e-6f3b-4f36-9b55-0f1d7c2b9a11",
    "username": "ops@example.com",
    "email": "ops@example.com",
    "display_name": None,
    "approved": True,
    "created_at": "2025-12-10T10:30:00Z",
    "updated_at": "2025-12-10T10:30:00Z",
}

signup_responses = {
    201: {
        "description": "Account Created",
        "content": {
            "application/json": {
                "examples": {
                    "approved": {
                        "summary": "Approved Immediately",
                        "value": {
                            "user": _user_example,
                            "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                        },
                    },
                    "pending": {
                        "summary": "Awaiting Approval",
                        "value": {
                            "user": {**_user_example, "approved": False},
                            "message": "Your account is pending approval",
                        },
                    },
                }
            }
        },
    },
    400: {
        "description": "Bad Request",
        "content": {
            "application/json": {
                "examples": {
                    "invalid_body": _error_example(
                        "Invalid Body", "Invalid request body"
                    )
                }
            }
        },
    },
    409: {
        "description": "Conflict",
        "content": {
            "application/json": {
                "examples": {
                    "duplicate": _error_example(
                        "Email Taken", "Email already registered"
                    )
                }
            }
        },
    },
}

login_responses = {
    200: {
        "description": "Login Successful",
        "content": {
            "application/json": {
                "examples": {
                    "success": {
                        "summary": "JWT Token",
                        "value": {
                            "user": _user_example,
                            "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                            "roles": ["admin"],
                        },
                    }
                }
            }
        },
    },
    401: {
        "description": "Unauthorized",
        "content": {
            "application/json": {
                "examples": {
                    "invalid_credentials": _error_example(
                        "Invalid Credentials", "Invalid credentials"
                    )
                }
            }
        },
    },
    403: {
        "description": "Forbidden",
        "content": {
            "application/json": {
                "examples": {
                    "pending": _error_example(
                        "Pending Approval", "Your account is pending approval"
                    )
                }
            }
        },
    },
}

me_responses = {
    200: {
        "description": "Current User",
        "content": {
            "application/json": {
                "examples": {
                    "success": {
                        "summary": "Profile And Roles",
                        "value": {"user": _user_example, "roles": []},
                    }
                }
            }
        },
    },
    401: {
        "description": "Unauthorized",
        "content": {
            "application/json": {
                "examples": {
                    "invalid_token": _error_example("Invalid Token", "Invalid token")
                }
            }
        },
    },
}
