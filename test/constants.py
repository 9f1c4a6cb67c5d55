CUSTOMER_ID = 'cust-0001-alice'
CUSTOMER_NAME = 'Alice'
CUSTOMER_PHONE = '+971501234567'

ANOTHER_CUSTOMER_ID = 'cust-0002-bob'
ANOTHER_CUSTOMER_PHONE = '+971509876543'

STAFF_ID = 'staff-0001'
STAFF_EMAIL = 'washer@3on.ae'

MANAGER_ID = 'manager-0001'
MANAGER_EMAIL = 'manager@3on.ae'

GUEST_PHONE_LOCAL = '050 123 4567'
GUEST_PHONE = '+971501234567'
