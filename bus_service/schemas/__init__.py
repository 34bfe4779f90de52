from . import bus_schemas, response_schemas, staff_schemas
