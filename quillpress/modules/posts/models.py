from ...core.database import db, generate_id, isoformat, utcnow

# Association table for Post and Tag (many-to-many)
post_tags = db.Table(
    'post_tags',
    db.Column('post_id', db.String(32), db.ForeignKey('posts.id', ondelete='CASCADE'), primary_key=True),
    db.Column('tag_id', db.String(32), db.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
)


class Post(db.Model):
    __tablename__ = 'posts'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    content = db.Column(db.Text, nullable=False)
    excerpt = db.Column(db.String(500))
    cover_image = db.Column(db.String(500))
    published = db.Column(db.Boolean, nullable=False, default=False, index=True)
    published_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    author_id = db.Column(db.String(32), db.ForeignKey('users.id'), nullable=False, index=True)

    author = db.relationship('User', back_populates='posts')
    tags = db.relationship('Tag', secondary=post_tags, back_populates='posts',
                           order_by='Tag.name')

    def to_dict(self, include_author_bio=False):
        return {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'content': self.content,
            'excerpt': self.excerpt,
            'coverImage': self.cover_image,
            'published': self.published,
            'publishedAt': isoformat(self.published_at),
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
            'authorId': self.author_id,
            'author': self.author.to_author_dict(include_bio=include_author_bio),
            # Same shape as the join rows the frontend reads: [{tag: {...}}]
            'tags': [{'tag': tag.to_dict()} for tag in self.tags],
        }

    def __repr__(self):
        return f'<Post {self.slug}>'
