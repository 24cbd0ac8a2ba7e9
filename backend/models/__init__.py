from models.farm import Farm
from models.product import Product
from models.users import User, UserRole
from models.production_records import ProductionRecord
from models.sales_invoices import SalesInvoice
from models.inventory import Inventory
from models.notifications import Notification

__all__ = ['Farm', 'Inventory', 'Notification', 'Product', 'ProductionRecord', 'SalesInvoice', 'User', 'UserRole']
