"""Initial database schema

Revision ID: 0001
Revises:
Create Date: 2025-09-15 10:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

EXACTLY_ONE_TARGET = '(package_id IS NULL) <> (event_id IS NULL)'


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def _user_ref(name: str) -> sa.Column:
    return sa.Column(name, sa.String(length=255), nullable=True)


def _user_fk(name: str) -> sa.ForeignKeyConstraint:
    return sa.ForeignKeyConstraint([name], ['users.id'], ondelete='SET NULL')


def upgrade() -> None:
    """Upgrade database schema."""
    # Accounts
    op.create_table('users',
        sa.Column('id', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('first_name', sa.String(length=255), nullable=True),
        sa.Column('last_name', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('profile_image_url', sa.String(length=1024), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_email_verified', sa.Boolean(), nullable=False),
        sa.Column('preferred_language', sa.String(length=10), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('auth_tokens',
        sa.Column('token', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('token')
    )
    op.create_index(op.f('ix_auth_tokens_user_id'), 'auth_tokens', ['user_id'], unique=False)
    op.create_index(op.f('ix_auth_tokens_expires_at'), 'auth_tokens', ['expires_at'], unique=False)

    # Catalog
    op.create_table('tour_packages',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('product_name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('overview', sa.Text(), nullable=True),
        sa.Column('destination', sa.String(length=255), nullable=False),
        sa.Column('duration_type', sa.String(length=32), nullable=False),
        sa.Column('duration_days', sa.Integer(), nullable=False),
        sa.Column('duration_nights', sa.Integer(), nullable=False),
        sa.Column('duration_hours', sa.Integer(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('booking_type', sa.String(length=32), nullable=False),
        sa.Column('min_passenger_count', sa.Integer(), nullable=False),
        sa.Column('max_passenger_count', sa.Integer(), nullable=True),
        sa.Column('starting_price', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('strike_through_price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('pricing_tiers', sa.JSON(), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('terms_and_conditions', sa.Text(), nullable=True),
        sa.Column('inclusions', sa.JSON(), nullable=False),
        sa.Column('exclusions', sa.JSON(), nullable=False),
        sa.Column('custom_highlights', sa.JSON(), nullable=False),
        sa.Column('gallery_images', sa.JSON(), nullable=False),
        sa.Column('itinerary', sa.JSON(), nullable=False),
        sa.Column('rating', sa.Numeric(precision=2, scale=1), nullable=False),
        sa.Column('review_count', sa.Integer(), nullable=False),
        sa.Column('featured', sa.Boolean(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('starting_price >= 0', name='ck_package_starting_price_non_negative'),
        sa.CheckConstraint('min_passenger_count >= 1', name='ck_package_min_passengers'),
        sa.CheckConstraint('rating >= 0 AND rating <= 5', name='ck_package_rating_range'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tour_packages_name'), 'tour_packages', ['name'], unique=False)
    op.create_index(op.f('ix_tour_packages_destination'), 'tour_packages', ['destination'], unique=False)
    op.create_index(op.f('ix_tour_packages_featured'), 'tour_packages', ['featured'], unique=False)
    op.create_index(op.f('ix_tour_packages_active'), 'tour_packages', ['active'], unique=False)

    op.create_table('events',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('image_url', sa.String(length=1024), nullable=True),
        sa.Column('website_url', sa.String(length=1024), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_events_name'), 'events', ['name'], unique=False)
    op.create_index(op.f('ix_events_location'), 'events', ['location'], unique=False)
    op.create_index(op.f('ix_events_start_date'), 'events', ['start_date'], unique=False)
    op.create_index(op.f('ix_events_active'), 'events', ['active'], unique=False)

    # Bookings
    op.create_table('bookings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=True),
        sa.Column('package_id', sa.Integer(), nullable=True),
        sa.Column('event_id', sa.Integer(), nullable=True),
        sa.Column('travel_date', sa.Date(), nullable=True),
        sa.Column('adults', sa.Integer(), nullable=False),
        sa.Column('children', sa.Integer(), nullable=False),
        sa.Column('hotel_category', sa.String(length=16), nullable=False),
        sa.Column('flight_included', sa.Boolean(), nullable=False),
        sa.Column('special_requests', sa.Text(), nullable=True),
        sa.Column('contact_name', sa.String(length=255), nullable=False),
        sa.Column('contact_email', sa.String(length=255), nullable=False),
        sa.Column('contact_phone', sa.String(length=50), nullable=True),
        sa.Column('total_amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('order_id', sa.String(length=64), nullable=True),
        sa.Column('payment_id', sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(EXACTLY_ONE_TARGET, name='ck_booking_exactly_one_target'),
        sa.CheckConstraint('adults >= 1', name='ck_booking_adults_positive'),
        sa.CheckConstraint('children >= 0', name='ck_booking_children_non_negative'),
        sa.CheckConstraint('total_amount >= 0', name='ck_booking_total_non_negative'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['package_id'], ['tour_packages.id']),
        sa.ForeignKeyConstraint(['event_id'], ['events.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('order_id'),
        sa.UniqueConstraint('payment_id')
    )
    op.create_index(op.f('ix_bookings_user_id'), 'bookings', ['user_id'], unique=False)
    op.create_index(op.f('ix_bookings_package_id'), 'bookings', ['package_id'], unique=False)
    op.create_index(op.f('ix_bookings_event_id'), 'bookings', ['event_id'], unique=False)
    op.create_index(op.f('ix_bookings_status'), 'bookings', ['status'], unique=False)
    op.create_index(op.f('ix_bookings_payment_status'), 'bookings', ['payment_status'], unique=False)

    op.create_table('travelers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=10), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=False),
        sa.Column('last_name', sa.String(length=255), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('nationality', sa.String(length=100), nullable=True),
        sa.Column('passport_number', sa.String(length=50), nullable=True),
        sa.Column('passport_expiry', sa.Date(), nullable=True),
        sa.Column('dietary_requirements', sa.Text(), nullable=True),
        sa.Column('medical_conditions', sa.Text(), nullable=True),
        sa.Column('emergency_contact_name', sa.String(length=255), nullable=True),
        sa.Column('emergency_contact_phone', sa.String(length=50), nullable=True),
        sa.Column('special_requests', sa.Text(), nullable=True),
        sa.CheckConstraint("type IN ('adult', 'child')", name='ck_traveler_type'),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_travelers_booking_id'), 'travelers', ['booking_id'], unique=False)

    op.create_table('payments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_id', sa.Integer(), nullable=False),
        sa.Column('razorpay_order_id', sa.String(length=64), nullable=False),
        sa.Column('razorpay_payment_id', sa.String(length=64), nullable=True),
        sa.Column('razorpay_signature', sa.String(length=128), nullable=True),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('method', sa.String(length=32), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('razorpay_order_id')
    )
    op.create_index(op.f('ix_payments_booking_id'), 'payments', ['booking_id'], unique=False)
    op.create_index(op.f('ix_payments_razorpay_payment_id'), 'payments', ['razorpay_payment_id'], unique=False)

    # Availability ledger
    op.create_table('availability',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('package_id', sa.Integer(), nullable=True),
        sa.Column('event_id', sa.Integer(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('total_slots', sa.Integer(), nullable=False),
        sa.Column('booked_slots', sa.Integer(), nullable=False),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(EXACTLY_ONE_TARGET, name='ck_availability_exactly_one_target'),
        sa.CheckConstraint('total_slots >= 0', name='ck_availability_total_non_negative'),
        sa.CheckConstraint('booked_slots >= 0', name='ck_availability_booked_non_negative'),
        sa.CheckConstraint('booked_slots <= total_slots', name='ck_availability_no_overbooking'),
        sa.ForeignKeyConstraint(['package_id'], ['tour_packages.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('package_id', 'date', name='uq_availability_package_date'),
        sa.UniqueConstraint('event_id', 'date', name='uq_availability_event_date')
    )
    op.create_index(op.f('ix_availability_package_id'), 'availability', ['package_id'], unique=False)
    op.create_index(op.f('ix_availability_event_id'), 'availability', ['event_id'], unique=False)
    op.create_index(op.f('ix_availability_date'), 'availability', ['date'], unique=False)

    op.create_table('reviews',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('package_id', sa.Integer(), nullable=True),
        sa.Column('event_id', sa.Integer(), nullable=True),
        sa.Column('booking_id', sa.Integer(), nullable=True),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=True),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('images', sa.JSON(), nullable=False),
        sa.Column('helpful', sa.Integer(), nullable=False),
        sa.Column('verified', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(EXACTLY_ONE_TARGET, name='ck_review_exactly_one_target'),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_review_rating_range'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['package_id'], ['tour_packages.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['event_id'], ['events.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_reviews_user_id'), 'reviews', ['user_id'], unique=False)
    op.create_index(op.f('ix_reviews_package_id'), 'reviews', ['package_id'], unique=False)
    op.create_index(op.f('ix_reviews_event_id'), 'reviews', ['event_id'], unique=False)

    # Content
    op.create_table('translations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('entity_type', sa.String(length=50), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=False),
        sa.Column('language', sa.String(length=10), nullable=False),
        sa.Column('field_name', sa.String(length=100), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('entity_type', 'entity_id', 'language', 'field_name', name='uq_translation_entity_field')
    )

    op.create_table('newsletters',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('subscribed', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_newsletters_email'), 'newsletters', ['email'], unique=True)

    op.create_table('contact_queries',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('subject', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('priority', sa.String(length=20), nullable=False),
        _user_ref('assigned_to'),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        _user_fk('assigned_to'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_contact_queries_status'), 'contact_queries', ['status'], unique=False)
    op.create_index(op.f('ix_contact_queries_priority'), 'contact_queries', ['priority'], unique=False)

    # CRM
    op.create_table('customers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        _user_ref('user_id'),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=False),
        sa.Column('last_name', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('company', sa.String(length=255), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('customer_type', sa.String(length=20), nullable=False),
        sa.Column('total_spent', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('total_bookings', sa.Integer(), nullable=False),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        _user_ref('assigned_to'),
        *_timestamps(),
        _user_fk('user_id'),
        _user_fk('assigned_to'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_customers_user_id'), 'customers', ['user_id'], unique=False)
    op.create_index(op.f('ix_customers_email'), 'customers', ['email'], unique=False)

    op.create_table('leads',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('source', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('priority', sa.String(length=20), nullable=False),
        sa.Column('budget', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('destination', sa.String(length=255), nullable=True),
        sa.Column('travel_date', sa.Date(), nullable=True),
        sa.Column('group_size', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        _user_ref('assigned_to'),
        sa.Column('next_follow_up', sa.DateTime(timezone=True), nullable=True),
        sa.Column('converted_customer_id', sa.Integer(), nullable=True),
        *_timestamps(),
        _user_fk('assigned_to'),
        sa.ForeignKeyConstraint(['converted_customer_id'], ['customers.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_leads_email'), 'leads', ['email'], unique=False)
    op.create_index(op.f('ix_leads_status'), 'leads', ['status'], unique=False)

    op.create_table('lead_activities',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lead_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        _user_ref('performed_by'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['lead_id'], ['leads.id'], ondelete='CASCADE'),
        _user_fk('performed_by'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_lead_activities_lead_id'), 'lead_activities', ['lead_id'], unique=False)

    op.create_table('opportunities',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=True),
        sa.Column('lead_id', sa.Integer(), nullable=True),
        sa.Column('package_id', sa.Integer(), nullable=True),
        sa.Column('stage', sa.String(length=20), nullable=False),
        sa.Column('probability', sa.Integer(), nullable=False),
        sa.Column('expected_value', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('expected_close_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        _user_ref('assigned_to'),
        *_timestamps(),
        sa.CheckConstraint('probability >= 0 AND probability <= 100', name='ck_opportunity_probability'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['lead_id'], ['leads.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['package_id'], ['tour_packages.id'], ondelete='SET NULL'),
        _user_fk('assigned_to'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_opportunities_customer_id'), 'opportunities', ['customer_id'], unique=False)
    op.create_index(op.f('ix_opportunities_lead_id'), 'opportunities', ['lead_id'], unique=False)
    op.create_index(op.f('ix_opportunities_stage'), 'opportunities', ['stage'], unique=False)

    op.create_table('customer_interactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('channel', sa.String(length=50), nullable=True),
        sa.Column('subject', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        _user_ref('performed_by'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        _user_fk('performed_by'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        op.f('ix_customer_interactions_customer_id'), 'customer_interactions', ['customer_id'], unique=False
    )

    op.create_table('customer_preferences',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('preferred_destinations', sa.JSON(), nullable=False),
        sa.Column('travel_style', sa.String(length=50), nullable=True),
        sa.Column('budget_range', sa.String(length=50), nullable=True),
        sa.Column('dietary', sa.String(length=255), nullable=True),
        sa.Column('communication_channel', sa.String(length=20), nullable=False),
        sa.Column('marketing_opt_in', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('customer_id')
    )

    op.create_table('email_templates',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('subject', sa.String(length=255), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('variables', sa.JSON(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False),
        _user_ref('created_by'),
        *_timestamps(),
        _user_fk('created_by'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )

    op.create_table('email_campaigns',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('template_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('scheduled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('recipients_count', sa.Integer(), nullable=False),
        sa.Column('opened_count', sa.Integer(), nullable=False),
        sa.Column('clicked_count', sa.Integer(), nullable=False),
        _user_ref('created_by'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['template_id'], ['email_templates.id'], ondelete='SET NULL'),
        _user_fk('created_by'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_email_campaigns_status'), 'email_campaigns', ['status'], unique=False)

    op.create_table('tasks',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('priority', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('related_to', sa.String(length=20), nullable=True),
        sa.Column('related_id', sa.Integer(), nullable=True),
        _user_ref('assigned_to'),
        _user_ref('created_by'),
        *_timestamps(),
        _user_fk('assigned_to'),
        _user_fk('created_by'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tasks_status'), 'tasks', ['status'], unique=False)
    op.create_index(op.f('ix_tasks_due_date'), 'tasks', ['due_date'], unique=False)


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table('tasks')
    op.drop_table('email_campaigns')
    op.drop_table('email_templates')
    op.drop_table('customer_preferences')
    op.drop_table('customer_interactions')
    op.drop_table('opportunities')
    op.drop_table('lead_activities')
    op.drop_table('leads')
    op.drop_table('customers')
    op.drop_table('contact_queries')
    op.drop_table('newsletters')
    op.drop_table('translations')
    op.drop_table('reviews')
    op.drop_table('availability')
    op.drop_table('payments')
    op.drop_table('travelers')
    op.drop_table('bookings')
    op.drop_table('events')
    op.drop_table('tour_packages')
    op.drop_table('auth_tokens')
    op.drop_table('users')
