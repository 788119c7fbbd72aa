"""

.. _userdata:

kubinit.provision
-----------------

User data for MicroK8s machines, rendered from the Jinja2 templates in
:py:mod:`kubinit.provision.templates`.

first control plane node
~~~~~~~~~~~~~~~~~~~~~~~~

Installs MicroK8s from the snap channel matching the requested Kubernetes
version, moves the cluster agent and dqlite to the configured ports,
re-issues the API server certificates with the supplied CA, creates the
join token and enables the addons.
See :py:func:`kubinit.provision.cloud_init.new_init_control_plane`

nth control plane node
~~~~~~~~~~~~~~~~~~~~~~

Installs MicroK8s and joins an existing control plane node, then hands out
the join token itself.
See :py:func:`kubinit.provision.cloud_init.new_join_control_plane`

worker node
~~~~~~~~~~~

See :py:func:`kubinit.provision.cloud_init.new_join_worker`

"""
