from ...core.database import db, generate_id, isoformat, utcnow


def _by_position(children):
    return sorted(children, key=lambda child: (child.sidebar_position, child.created_at, child.id))


class DocumentationProduct(db.Model):
    __tablename__ = 'documentation_products'

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    description = db.Column(db.Text)
    published = db.Column(db.Boolean, nullable=False, default=False)
    sidebar_position = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    sections = db.relationship('DocumentationSection', back_populates='product',
                               cascade='all, delete-orphan')

    def to_dict(self, include_sections=True, published_only=False):
        data = {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'description': self.description,
            'published': self.published,
            'sidebarPosition': self.sidebar_position,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if include_sections:
            sections = _by_position(self.sections)
            if published_only:
                sections = [section for section in sections if section.published]
            data['sections'] = [section.to_dict(published_only=published_only) for section in sections]
        return data

    def __repr__(self):
        return f'<DocumentationProduct {self.slug}>'


class DocumentationSection(db.Model):
    __tablename__ = 'documentation_sections'
    __table_args__ = (
        db.UniqueConstraint('product_id', 'slug', name='uq_documentation_sections_product_slug'),
    )

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    sidebar_position = db.Column(db.Integer, nullable=False, default=0)
    published = db.Column(db.Boolean, nullable=False, default=False)
    product_id = db.Column(db.String(32),
                           db.ForeignKey('documentation_products.id', ondelete='CASCADE'),
                           nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    product = db.relationship('DocumentationProduct', back_populates='sections')
    pages = db.relationship('DocumentationPage', back_populates='section',
                            cascade='all, delete-orphan')

    def to_dict(self, include_pages=True, published_only=False):
        data = {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'description': self.description,
            'sidebarPosition': self.sidebar_position,
            'published': self.published,
            'productId': self.product_id,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if include_pages:
            pages = _by_position(self.pages)
            if published_only:
                pages = [page for page in pages if page.published]
            data['pages'] = [page.to_dict() for page in pages]
        return data

    def __repr__(self):
        return f'<DocumentationSection {self.slug}>'


class DocumentationPage(db.Model):
    __tablename__ = 'documentation_pages'
    __table_args__ = (
        db.UniqueConstraint('section_id', 'slug', name='uq_documentation_pages_section_slug'),
    )

    id = db.Column(db.String(32), primary_key=True, default=generate_id)
    title = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    excerpt = db.Column(db.Text)
    sidebar_position = db.Column(db.Integer, nullable=False, default=0)
    published = db.Column(db.Boolean, nullable=False, default=False)
    section_id = db.Column(db.String(32),
                           db.ForeignKey('documentation_sections.id', ondelete='CASCADE'),
                           nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    section = db.relationship('DocumentationSection', back_populates='pages')

    def to_dict(self, include_section=False):
        data = {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'content': self.content,
            'excerpt': self.excerpt,
            'sidebarPosition': self.sidebar_position,
            'published': self.published,
            'sectionId': self.section_id,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }
        if include_section:
            section = self.section.to_dict(include_pages=False)
            section['product'] = self.section.product.to_dict(include_sections=False)
            data['section'] = section
        return data

    def __repr__(self):
        return f'<DocumentationPage {self.slug}>'
