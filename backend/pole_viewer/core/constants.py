# PostgreSQL SQLSTATE raised when statement_timeout cancels a query
QUERY_CANCELED_SQLSTATE = '57014'
