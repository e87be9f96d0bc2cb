# Routes package
