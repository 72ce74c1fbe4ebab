from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime
from .base import Base, now_utc, new_id
from ..types import JSONList


class SiteSettings(Base):
    __tablename__ = 'site_settings'
    id = Column(String(36), primary_key=True, default=new_id)
    site_name = Column(String(255), default="Archie's Remedies")
    tagline = Column(Text)
    logo_url = Column(Text)
    favicon_url = Column(Text)
    primary_color = Column(String(20), default='#bbdae9')
    secondary_color = Column(String(20), default='#f5f0eb')
    accent_color = Column(String(20))
    # SEO
    meta_title = Column(Text)
    meta_description = Column(Text)
    og_image_url = Column(Text)
    # Social
    instagram_url = Column(Text)
    facebook_url = Column(Text)
    tiktok_url = Column(Text)
    amazon_store_url = Column(Text)
    # Tracking pixels
    facebook_pixel_id = Column(String(64))
    google_analytics_id = Column(String(64))
    tiktok_pixel_id = Column(String(64))
    contact_email = Column(String(320))
    # Legacy email popup, still read as the welcome popup fallback
    email_popup_enabled = Column(Boolean, default=True)
    email_popup_title = Column(Text, default='Join Our Community')
    email_popup_subtitle = Column(Text)
    email_popup_button_text = Column(Text, default='Subscribe')
    email_popup_image_url = Column(Text)
    # Welcome popup
    welcome_popup_enabled = Column(Boolean, nullable=True)
    welcome_popup_title = Column(Text)
    welcome_popup_subtitle = Column(Text)
    welcome_popup_button_text = Column(Text)
    welcome_popup_image_url = Column(Text)
    welcome_popup_video_url = Column(Text)
    welcome_popup_form_desktop_image_url = Column(Text)
    welcome_popup_form_desktop_video_url = Column(Text)
    welcome_popup_form_mobile_image_url = Column(Text)
    welcome_popup_form_mobile_video_url = Column(Text)
    welcome_popup_success_desktop_image_url = Column(Text)
    welcome_popup_success_desktop_video_url = Column(Text)
    welcome_popup_success_mobile_image_url = Column(Text)
    welcome_popup_success_mobile_video_url = Column(Text)
    welcome_popup_dismiss_days = Column(Integer, nullable=True)
    welcome_popup_cta_type = Column(String(20), nullable=True)
    welcome_popup_download_url = Column(Text)
    welcome_popup_download_name = Column(Text)
    welcome_popup_download_text = Column(Text)
    welcome_popup_success_title = Column(Text)
    welcome_popup_success_message = Column(Text)
    welcome_popup_testimonial_enabled = Column(Boolean, nullable=True)
    welcome_popup_testimonial_enabled_desktop = Column(Boolean, nullable=True)
    welcome_popup_testimonial_enabled_mobile = Column(Boolean, nullable=True)
    welcome_popup_testimonial_quote = Column(Text)
    welcome_popup_testimonial_author = Column(Text)
    welcome_popup_testimonial_avatar_url = Column(Text)
    welcome_popup_testimonial_stars = Column(Integer, nullable=True)
    welcome_popup_success_link1_text = Column(Text)
    welcome_popup_success_link1_url = Column(Text)
    welcome_popup_success_link2_text = Column(Text)
    welcome_popup_success_link2_url = Column(Text)
    welcome_popup_form_badge_url = Column(Text)
    welcome_popup_success_badge_url = Column(Text)
    welcome_popup_delay = Column(Integer, nullable=True)
    welcome_popup_session_only = Column(Boolean, nullable=True)
    welcome_popup_session_expiry_hours = Column(Integer, nullable=True)
    # Exit popup
    exit_popup_enabled = Column(Boolean, nullable=True)
    exit_popup_title = Column(Text)
    exit_popup_subtitle = Column(Text)
    exit_popup_button_text = Column(Text)
    exit_popup_image_url = Column(Text)
    exit_popup_video_url = Column(Text)
    exit_popup_form_desktop_image_url = Column(Text)
    exit_popup_form_desktop_video_url = Column(Text)
    exit_popup_form_mobile_image_url = Column(Text)
    exit_popup_form_mobile_video_url = Column(Text)
    exit_popup_success_desktop_image_url = Column(Text)
    exit_popup_success_desktop_video_url = Column(Text)
    exit_popup_success_mobile_image_url = Column(Text)
    exit_popup_success_mobile_video_url = Column(Text)
    exit_popup_dismiss_days = Column(Integer, nullable=True)
    exit_popup_cta_type = Column(String(20), nullable=True)
    exit_popup_download_url = Column(Text)
    exit_popup_download_name = Column(Text)
    exit_popup_download_text = Column(Text)
    exit_popup_success_title = Column(Text)
    exit_popup_success_message = Column(Text)
    exit_popup_testimonial_enabled = Column(Boolean, nullable=True)
    exit_popup_testimonial_enabled_desktop = Column(Boolean, nullable=True)
    exit_popup_testimonial_enabled_mobile = Column(Boolean, nullable=True)
    exit_popup_testimonial_quote = Column(Text)
    exit_popup_testimonial_author = Column(Text)
    exit_popup_testimonial_avatar_url = Column(Text)
    exit_popup_testimonial_stars = Column(Integer, nullable=True)
    exit_popup_success_link1_text = Column(Text)
    exit_popup_success_link1_url = Column(Text)
    exit_popup_success_link2_text = Column(Text)
    exit_popup_success_link2_url = Column(Text)
    exit_popup_form_badge_url = Column(Text)
    exit_popup_success_badge_url = Column(Text)
    exit_popup_delay_after_welcome = Column(Integer, nullable=True)
    # Announcement bumper
    bumper_enabled = Column(Boolean, default=False)
    bumper_text = Column(Text)
    bumper_link_url = Column(Text)
    bumper_link_text = Column(Text)
    bumper_theme = Column(String(20), default='light')
    # Social proof
    total_reviews = Column(Integer, default=2900)
    total_customers = Column(Integer, default=10000)
    instagram_followers = Column(Integer)
    facebook_followers = Column(Integer)
    tiktok_followers = Column(Integer)
    # Navigation
    nav_logo_position = Column(String(20))
    nav_cta_enabled = Column(Boolean, nullable=True)
    nav_cta_text = Column(Text)
    nav_cta_url = Column(Text)
    nav_marketing_tile_title = Column(Text)
    nav_marketing_tile_description = Column(Text)
    nav_marketing_tile_badge1 = Column(Text)
    nav_marketing_tile_badge2 = Column(Text)
    nav_marketing_tile_badge3 = Column(Text)
    # Footer
    footer_theme = Column(String(20), default='dark')
    massive_footer_logo_url = Column(Text)
    site_in_draft_mode = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class BlogSettings(Base):
    __tablename__ = 'blog_settings'
    id = Column(String(36), primary_key=True, default='default')
    blog_name = Column(String(255), default='Blog')
    blog_slug = Column(String(100), default='blog')
    page_title = Column(Text, default='Blog')
    page_subtitle = Column(Text)
    grid_layout = Column(String(20), default='masonry')
    widgets = Column(JSONList())
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)
