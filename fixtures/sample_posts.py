"""
Sample raw post records for collection testing.
Shaped like the front-end's blogPosts entries (camelCase keys).
"""

from __future__ import annotations


def make_record(
    post_id: str,
    date: str,
    tags: list[str] | None = None,
    title: str | None = None,
    author: str = "Baha",
    excerpt: str = "",
) -> dict:
    """Build a minimal valid raw record."""
    return {
        "id": post_id,
        "title": title or f"Post {post_id}",
        "excerpt": excerpt,
        "content": f"<article><p>Body of post {post_id}</p></article>",
        "date": date,
        "tags": tags if tags is not None else [],
        "readTime": "5 min read",
        "image": f"https://images.example.com/{post_id}.jpg",
        "author": {
            "name": author,
            "avatar": "https://avatars.githubusercontent.com/u/91181868?v=4",
        },
    }


def get_react_guide_record() -> dict:
    """The front-end's original post."""
    return {
        "id": "1",
        "title": "Building a Modern React Application: A Complete Guide",
        "excerpt": (
            "Learn how to build a production-ready React application with "
            "TypeScript, Tailwind CSS, and best practices for 2024."
        ),
        "content": (
            '<article class="prose prose-invert prose-blue max-w-none">'
            "<h1>Building a Modern React Application</h1></article>"
        ),
        "date": "2024-03-15",
        "tags": ["react", "typescript", "tutorial"],
        "readTime": "12 min read",
        "image": "https://images.unsplash.com/photo-1555066931-4365d14bab8c?auto=format&fit=crop&w=1600&q=80",
        "author": {
            "name": "Baha",
            "avatar": "https://avatars.githubusercontent.com/u/91181868?v=4",
        },
    }


def get_sample_records() -> list[dict]:
    """A small mixed collection: several tags, authors and dates."""
    return [
        get_react_guide_record(),
        make_record(
            "2", "2024-01-20", ["react", "hooks"],
            title="Mastering React Hooks",
            excerpt="useMemo, useCallback and friends in practice.",
        ),
        make_record(
            "3", "2024-05-02", ["typescript"],
            title="TypeScript Generics Explained",
            author="Ana",
            excerpt="Write reusable, type-safe utilities.",
        ),
        make_record(
            "4", "2023-11-30", ["css", "tailwind"],
            title="Tailwind CSS Tips",
            author="Ana",
        ),
        make_record(
            "5", "2024-03-15", ["react", "testing"],
            title="Testing React Components",
            excerpt="Confident UI tests with Testing Library.",
        ),
    ]
