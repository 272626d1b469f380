"""Install-time provisioning for the OneDB/Informix ODBC binding."""
