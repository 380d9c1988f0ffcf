from __future__ import annotations

# Demo accounts and assessments used by the seed script and the test suite.
DEMO_USERS = [
    {
        "login": "admin",
        "email": "admin@localhost",
        "first_name": "Administrator",
        "last_name": "Administrator",
        "activated": True,
        "lang_key": "en",
    },
    {
        "login": "bob",
        "email": "bob@example.com",
        "first_name": "Bob",
        "last_name": "Builder",
        "activated": True,
        "lang_key": "en",
    },
    {
        "login": "alice",
        "email": "alice@example.com",
        "first_name": "Alice",
        "last_name": "Liddell",
        "activated": True,
        "lang_key": "en",
    },
    {
        "login": "pending",
        "email": "pending@example.com",
        "first_name": "Pending",
        "last_name": "User",
        "activated": False,
        "activation_key": "12345678901234567890",
        "lang_key": "en",
    },
]

DEMO_ASSESSMENTS = [
    {
        "type": "quiz1",
        "title": "Java Basics Quiz",
        "description": "Variables, control flow and methods.",
        "total_points": 10,
        "time_limit_minutes": 30,
    },
    {
        "type": "assignment",
        "title": "Library Management Assignment",
        "description": "Object-oriented design exercise submitted as a GitHub repository.",
        "total_points": 100,
        "time_limit_minutes": None,
    },
    {
        "type": "capstone",
        "title": "Capstone Project",
        "description": "Full-stack project reviewed for code quality.",
        "total_points": 200,
        "time_limit_minutes": None,
    },
]
