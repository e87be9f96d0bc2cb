# Agents package
