# ===================================
# babobamboo/models/feature.py
# ===================================
from sqlalchemy import Column, Integer, Boolean, DateTime
from sqlalchemy.sql import func

from babobamboo.core.database import Base

FEATURE_SETTINGS_ID = 1

# Valeur par défaut de chaque drapeau (ligne absente ou lecture en échec)
FEATURE_DEFAULTS = {
    "enable_tax_purchase": True,
    "enable_shipping_by_price_zone": True,
    "enable_dutch_language": True,
    "enable_four_part_address": True,
    "enable_provinces_list": True,
    "enable_news_marquee": True,
    "enable_discount_coupons": True,
    "enable_product_offers": True,
    "enable_order_rating": True,
    "enable_auto_rating_email": True,
    "enable_rating_link_after_3_days": True,
    "enable_accounting_dashboard": True,
    "enable_data_charts": True,
    "enable_top_products_analytics": True,
    "enable_sales_reporting": True,
    "enable_user_registration": True,
    "enable_customer_accounts": True,
    "enable_company_accounts": True,
    "enable_email_subscription_popup": True,
    "enable_customer_dashboard": True,
    "enable_company_dashboard": True,
    "enable_multiple_addresses": True,
    "enable_wholesale_products": True,
    "enable_company_only_wholesale": True,
    "enable_email_verification": True,
    "enable_verification_code": True,
    "enable_activation_link": True,
    "enable_company_name_field": True,
    "enable_license_number_field": True,
    "enable_company_approval": True,
    "enable_admin_approval_required": True,
    "enable_restricted_company_cart": True,
    "enable_wholesale_retail_separation": True,
    "enable_contact_forms": True,
    "enable_job_applications": True,
    "enable_order_creation": True,
    # Verrouillage du site : jamais actif par défaut
    "enable_unpaid_site_lock": False,
}


class FeatureSettings(Base):
    """Ligne unique (id = 1) de drapeaux de fonctionnalités"""
    __tablename__ = "feature_settings"

    id = Column(Integer, primary_key=True, default=FEATURE_SETTINGS_ID)

    # Commerce
    enable_tax_purchase = Column(Boolean, nullable=False, default=True)
    enable_shipping_by_price_zone = Column(Boolean, nullable=False, default=True)
    enable_discount_coupons = Column(Boolean, nullable=False, default=True)
    enable_product_offers = Column(Boolean, nullable=False, default=True)
    enable_order_creation = Column(Boolean, nullable=False, default=True)
    enable_wholesale_products = Column(Boolean, nullable=False, default=True)
    enable_company_only_wholesale = Column(Boolean, nullable=False, default=True)
    enable_restricted_company_cart = Column(Boolean, nullable=False, default=True)
    enable_wholesale_retail_separation = Column(Boolean, nullable=False, default=True)

    # Contenu et langues
    enable_dutch_language = Column(Boolean, nullable=False, default=True)
    enable_four_part_address = Column(Boolean, nullable=False, default=True)
    enable_provinces_list = Column(Boolean, nullable=False, default=True)
    enable_news_marquee = Column(Boolean, nullable=False, default=True)
    enable_email_subscription_popup = Column(Boolean, nullable=False, default=True)
    enable_contact_forms = Column(Boolean, nullable=False, default=True)
    enable_job_applications = Column(Boolean, nullable=False, default=True)

    # Notation des commandes
    enable_order_rating = Column(Boolean, nullable=False, default=True)
    enable_auto_rating_email = Column(Boolean, nullable=False, default=True)
    enable_rating_link_after_3_days = Column(Boolean, nullable=False, default=True)

    # Tableaux de bord admin
    enable_accounting_dashboard = Column(Boolean, nullable=False, default=True)
    enable_data_charts = Column(Boolean, nullable=False, default=True)
    enable_top_products_analytics = Column(Boolean, nullable=False, default=True)
    enable_sales_reporting = Column(Boolean, nullable=False, default=True)

    # Comptes
    enable_user_registration = Column(Boolean, nullable=False, default=True)
    enable_customer_accounts = Column(Boolean, nullable=False, default=True)
    enable_company_accounts = Column(Boolean, nullable=False, default=True)
    enable_customer_dashboard = Column(Boolean, nullable=False, default=True)
    enable_company_dashboard = Column(Boolean, nullable=False, default=True)
    enable_multiple_addresses = Column(Boolean, nullable=False, default=True)
    enable_email_verification = Column(Boolean, nullable=False, default=True)
    enable_verification_code = Column(Boolean, nullable=False, default=True)
    enable_activation_link = Column(Boolean, nullable=False, default=True)
    enable_company_name_field = Column(Boolean, nullable=False, default=True)
    enable_license_number_field = Column(Boolean, nullable=False, default=True)
    enable_company_approval = Column(Boolean, nullable=False, default=True)
    enable_admin_approval_required = Column(Boolean, nullable=False, default=True)

    # Site
    enable_unpaid_site_lock = Column(Boolean, nullable=False, default=False)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<FeatureSettings(id={self.id})>"

    def to_dict(self) -> dict:
        """Tous les drapeaux, colonnes NULL remplacées par leur défaut"""
        flags = {}
        for name, default in FEATURE_DEFAULTS.items():
            value = getattr(self, name)
            flags[name] = default if value is None else bool(value)
        return flags
