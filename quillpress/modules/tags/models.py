from ...core.database import db, generate_id, isoformat, utcnow
from ..posts.models import post_tags


class Tag(db.Model):
    __tablename__ = 'tags'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    name = db.Column(db.String(50), unique=True, nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    description = db.Column(db.String(200))
    color = db.Column(db.String(7))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    posts = db.relationship('Post', secondary=post_tags, back_populates='tags')

    def post_count(self):
        return db.session.query(post_tags).filter(post_tags.c.tag_id == self.id).count()

    def to_dict(self, include_post_count=False):
        data = {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'description': self.description,
            'color': self.color,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if include_post_count:
            data['_count'] = {'posts': self.post_count()}
        return data

    def __repr__(self):
        return f'<Tag {self.name}>'
