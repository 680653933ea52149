"""Make tests a package so Django's runner (`manage.py test`) discovers them."""
