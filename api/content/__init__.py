"""
Website content resources: categories, products, services, news,
certifications, customer logos and the contact page singleton.
"""
