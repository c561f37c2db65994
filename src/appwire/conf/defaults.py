"""Default configuration values for appwire."""

ENVVAR = "APPWIRE_CONFIG_MODULE"

DEFAULTS: dict[str, object] = {
    # Import string of the module resolver class used for string factories
    "MODULE_RESOLVER": "appwire.resolvers.default:DefaultModuleResolver",
    # Package that relative module identifiers (".module:attr") are resolved against
    "MODULE_PREFIX": None,
    # Import strings of Definitions objects (or mappings) loaded by App.setup()
    "DEFINITION_MODULES": (),
    # Prefix for identities generated by create_widget()
    "WIDGET_ID_PREFIX": "widget-",
}
