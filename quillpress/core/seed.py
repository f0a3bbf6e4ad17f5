"""
Sample Data
===========

Demo users, tags and posts for a fresh install (`flask seed-db`).
Rows are matched on email or username (users), slug or name (tags)
and slug (posts). Anything already present is left untouched, so the
command can be re-run.
"""

import logging

from sqlalchemy import func, or_

from .database import db, utcnow

logger = logging.getLogger(__name__)

SAMPLE_PASSWORD = 'password123'

SAMPLE_USERS = [
    {
        'email': 'john.doe@example.com',
        'username': 'johndoe',
        'first_name': 'John',
        'last_name': 'Doe',
        'bio': 'A passionate writer and developer who loves sharing knowledge through blog posts.',
    },
    {
        'email': 'jane.smith@example.com',
        'username': 'janesmith',
        'first_name': 'Jane',
        'last_name': 'Smith',
        'bio': 'Tech enthusiast and blogger with a focus on web development and design.',
    },
]

SAMPLE_TAGS = [
    {'name': 'React', 'slug': 'react', 'description': 'Component-based UI development', 'color': '#61DAFB'},
    {'name': 'CSS', 'slug': 'css', 'description': 'Styling and layout', 'color': '#264DE4'},
    {'name': 'TypeScript', 'slug': 'typescript', 'description': 'Typed JavaScript', 'color': '#3178C6'},
]

SAMPLE_POSTS = [
    {
        'title': 'Getting Started with React',
        'slug': 'getting-started-with-react',
        'author': 'john.doe@example.com',
        'tags': ['react'],
        'published': True,
        'excerpt': 'Learn the fundamentals of React and how to build your first component-based application.',
        'content': (
            "# Getting Started with React\n\n"
            "React is a declarative, efficient and flexible JavaScript library for building "
            "user interfaces. It lets you compose complex UIs from small, isolated components.\n\n"
            "## Your First Component\n\n"
            "```jsx\nfunction Welcome(props) {\n  return <h1>Hello, {props.name}!</h1>;\n}\n```\n"
        ),
    },
    {
        'title': 'Modern CSS Techniques for 2024',
        'slug': 'modern-css-techniques',
        'author': 'jane.smith@example.com',
        'tags': ['css'],
        'published': True,
        'excerpt': 'Discover the latest CSS techniques and features that will improve your web development workflow.',
        'content': (
            "# Modern CSS Techniques for 2024\n\n"
            "## Container Queries\n\n"
            "```css\n@container (min-width: 400px) {\n  .card { display: flex; }\n}\n```\n\n"
            "## Subgrid\n\n"
            "```css\n.subgrid { display: grid; grid-template-columns: subgrid; }\n```\n"
        ),
    },
    {
        'title': 'TypeScript Tips and Tricks',
        'slug': 'draft-post-typescript-tips',
        'author': 'john.doe@example.com',
        'tags': ['typescript'],
        'published': False,
        'excerpt': 'A collection of useful TypeScript tips for better development.',
        'content': "# TypeScript Tips and Tricks\n\nThis is a draft post about TypeScript best practices...\n",
    },
]


def seed_sample_data():
    """Insert the sample rows that are missing.

    The first user created on an empty database is an admin, matching
    what registration does.

    Returns:
        dict of model name -> number of rows created
    """
    from ..modules.auth.models import User
    from ..modules.posts.models import Post
    from ..modules.tags.models import Tag

    created = {'users': 0, 'tags': 0, 'posts': 0}

    users = {}
    for fields in SAMPLE_USERS:
        user = User.query.filter(or_(
            User.email == fields['email'], User.username == fields['username'],
        )).first()
        if user is None:
            user = User(is_admin=User.query.count() == 0, **fields)
            user.set_password(SAMPLE_PASSWORD)
            db.session.add(user)
            db.session.flush()
            created['users'] += 1
        users[fields['email']] = user

    tags = {}
    for fields in SAMPLE_TAGS:
        tag = Tag.query.filter(or_(
            Tag.slug == fields['slug'], func.lower(Tag.name) == fields['name'].lower(),
        )).first()
        if tag is None:
            tag = Tag(**fields)
            db.session.add(tag)
            created['tags'] += 1
        tags[fields['slug']] = tag

    for fields in SAMPLE_POSTS:
        if Post.query.filter_by(slug=fields['slug']).first() is not None:
            continue
        db.session.add(Post(
            title=fields['title'],
            slug=fields['slug'],
            content=fields['content'],
            excerpt=fields['excerpt'],
            published=fields['published'],
            published_at=utcnow() if fields['published'] else None,
            author=users[fields['author']],
            tags=[tags[slug] for slug in fields['tags']],
        ))
        created['posts'] += 1

    db.session.commit()
    logger.info(f"Sample data seeded: {created}")
    return created
