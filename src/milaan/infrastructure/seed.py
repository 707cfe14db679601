"""Demo directory loaded into a fresh session.

Four users (two helpers, two askers), five problems across the
lifecycle, and a handful of comments. Loaded when
``[session] seed_demo_data`` is enabled.
"""

from __future__ import annotations

from milaan.domain.models import Comment, Problem, User

_USERS: list[dict[str, object]] = [
    {
        "id": "user_1",
        "name": "John Helper",
        "email": "helper@example.com",
        "avatar": "https://randomuser.me/api/portraits/men/1.jpg",
        "bio": "Dedicated to helping others with social issues. "
        "5 years experience working with NGOs.",
        "role": "helper",
        "location": {"lat": 19.0760, "lng": 72.8777, "address": "Mumbai, India"},
        "created_at": "2023-01-15T10:30:00Z",
        "help_count": 27,
        "rating": 4.8,
    },
    {
        "id": "user_2",
        "name": "Sara Needy",
        "email": "asker@example.com",
        "avatar": "https://randomuser.me/api/portraits/women/2.jpg",
        "bio": "Looking for assistance with community projects and personal issues.",
        "role": "asker",
        "location": {"lat": 19.0330, "lng": 73.0297, "address": "Navi Mumbai, India"},
        "created_at": "2023-02-10T14:20:00Z",
        "problem_count": 5,
    },
    {
        "id": "user_3",
        "name": "Amit Volunteer",
        "email": "amit@example.com",
        "avatar": "https://randomuser.me/api/portraits/men/3.jpg",
        "bio": "NGO worker with expertise in education and healthcare.",
        "role": "helper",
        "location": {"lat": 18.9220, "lng": 72.8347, "address": "South Mumbai, India"},
        "created_at": "2022-11-05T09:15:00Z",
        "help_count": 42,
        "rating": 4.9,
    },
    {
        "id": "user_4",
        "name": "Priya Sharma",
        "email": "priya@example.com",
        "avatar": "https://randomuser.me/api/portraits/women/4.jpg",
        "bio": "Seeking help with community development initiatives in my neighborhood.",
        "role": "asker",
        "location": {"lat": 19.1176, "lng": 72.9060, "address": "Powai, Mumbai, India"},
        "created_at": "2023-03-18T11:45:00Z",
        "problem_count": 3,
    },
]

# Stored most-recent-first, like the live collection.
_PROBLEMS: list[dict[str, object]] = [
    {
        "id": "problem_2",
        "title": "Urgent: Need help with flood relief efforts",
        "description": "Our area has been affected by recent floods. We need volunteers "
        "to help distribute supplies and assist with cleanup efforts. "
        "Any help is appreciated.",
        "category": "disaster",
        "status": "in-progress",
        "location": {"lat": 19.0330, "lng": 73.0297, "address": "Kalyan, Maharashtra, India"},
        "images": ["https://images.pexels.com/photos/1732305/pexels-photo-1732305.jpeg"],
        "user_id": "user_2",
        "helper_ids": ["user_1", "user_3"],
        "created_at": "2023-06-15T14:20:00Z",
        "updated_at": "2023-06-16T09:45:00Z",
        "upvotes": 42,
        "is_urgent": True,
    },
    {
        "id": "problem_3",
        "title": "Need guidance for starting a small business",
        "description": "I am a single mother looking to start a small tailoring business "
        "from home. Need advice on business registration, marketing, and "
        "securing small loans.",
        "category": "business",
        "status": "solved",
        "location": {"lat": 18.9220, "lng": 72.8347, "address": "Dadar, Mumbai, India"},
        "user_id": "user_4",
        "helper_ids": ["user_3"],
        "created_at": "2023-06-01T11:15:00Z",
        "updated_at": "2023-06-02T14:30:00Z",
        "upvotes": 7,
        "is_urgent": False,
    },
    {
        "id": "problem_4",
        "title": "Seeking mentorship for underprivileged children",
        "description": "Looking for mentors who can spare 2 hours a week to guide high "
        "school students from low-income families with career advice and "
        "academic support.",
        "category": "education",
        "status": "open",
        "location": {"lat": 19.1176, "lng": 72.9060, "address": "Thane, Maharashtra, India"},
        "images": ["https://images.pexels.com/photos/8363104/pexels-photo-8363104.jpeg"],
        "user_id": "user_2",
        "created_at": "2023-05-25T16:40:00Z",
        "updated_at": "2023-05-25T16:40:00Z",
        "upvotes": 23,
        "is_urgent": False,
    },
    {
        "id": "problem_1",
        "title": "Need assistance with setting up a community library",
        "description": "We have collected books but need help organizing and setting up a "
        "small library in our community center. Looking for volunteers with "
        "experience in library management.",
        "category": "education",
        "status": "open",
        "location": {"lat": 19.0760, "lng": 72.8777, "address": "Andheri, Mumbai, India"},
        "images": [
            "https://images.pexels.com/photos/159711/books-bookstore-book-reading-159711.jpeg",
            "https://images.pexels.com/photos/1319854/pexels-photo-1319854.jpeg",
        ],
        "user_id": "user_4",
        "created_at": "2023-05-10T08:30:00Z",
        "updated_at": "2023-05-10T08:30:00Z",
        "upvotes": 15,
        "is_urgent": False,
    },
    {
        "id": "problem_5",
        "title": "Need legal advice regarding property dispute",
        "description": "My family is facing a property dispute after my father passed away. "
        "Need guidance on legal procedures and documentation required.",
        "category": "legal",
        "status": "solved",
        "location": {"lat": 19.0178, "lng": 72.8478, "address": "Bandra, Mumbai, India"},
        "user_id": "user_4",
        "helper_ids": ["user_3"],
        "created_at": "2023-04-12T10:30:00Z",
        "updated_at": "2023-04-20T15:10:00Z",
        "upvotes": 12,
        "is_urgent": False,
    },
]

_COMMENTS: list[dict[str, object]] = [
    {
        "id": "comment_1",
        "content": "I can help organize the books and set up a catalog system. I have "
        "experience setting up a community library in my previous locality.",
        "problem_id": "problem_1",
        "user_id": "user_1",
        "created_at": "2023-05-10T10:15:00Z",
    },
    {
        "id": "comment_2",
        "content": "Our NGO has furniture that could be donated to your library setup. "
        "Please contact me to arrange logistics.",
        "problem_id": "problem_1",
        "user_id": "user_3",
        "created_at": "2023-05-11T09:30:00Z",
    },
    {
        "id": "comment_3",
        "content": "My team of volunteers is heading to Kalyan tomorrow. We have supplies "
        "and equipment for cleanup. Will coordinate with you directly.",
        "problem_id": "problem_2",
        "user_id": "user_1",
        "created_at": "2023-06-16T08:45:00Z",
    },
    {
        "id": "comment_4",
        "content": "Our organization can offer microloans for small businesses like yours. "
        "We also provide free business training workshops.",
        "problem_id": "problem_3",
        "user_id": "user_3",
        "created_at": "2023-06-02T14:20:00Z",
        "is_solution": True,
    },
]


def demo_users() -> list[User]:
    return [User.model_validate(row) for row in _USERS]


def demo_problems() -> list[Problem]:
    """Demo problems, most recent first. ``comment_count`` is filled in on load."""
    return [Problem.model_validate(row) for row in _PROBLEMS]


def demo_comments() -> list[Comment]:
    return [Comment.model_validate(row) for row in _COMMENTS]
